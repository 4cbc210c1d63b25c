"""Abstract interface for access-token persistence.

The client never knows where a token lives.  It reads the current token on
every request and writes a new one after a successful login, always through
this contract, so a file, a keyring, or a database can back it.
"""

from abc import ABC, abstractmethod

DEFAULT_CLIENT_TAG = "rest"


class TokenStore(ABC):
    """A persisted slot holding one opaque access token per client tag.

    Implementations do no expiry tracking; validity is decided by the
    server and probed by
    :meth:`~featherclient.rest.auth.AuthenticationManager.re_authenticate`.

    Example usage::

        store = JsonFileTokenStore()            # concrete implementation
        client = RestClient(base_url, store)    # injected into the client
    """

    @abstractmethod
    def get_access_token(
        self, client: str = DEFAULT_CLIENT_TAG
    ) -> str | None:
        """Return the stored token, or ``None`` when absent.

        This method must not raise; unreadable storage reads as absent.
        """

    @abstractmethod
    def save_access_token(
        self, token: str, client: str = DEFAULT_CLIENT_TAG
    ) -> None:
        """Persist *token* under the *client* tag, replacing any previous one."""

    @abstractmethod
    def clear_access_token(self, client: str = DEFAULT_CLIENT_TAG) -> bool:
        """Remove the token stored under *client*.

        Returns:
            ``True`` if a token was removed, ``False`` if none was stored.
        """

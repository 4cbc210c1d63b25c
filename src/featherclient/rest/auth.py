"""Login and session-validity probing.

The session state is implicit: a client is authenticated when the token
store holds a token the server still accepts.  :meth:`authenticate` moves a
client into that state; :meth:`re_authenticate` checks whether it is still
there.  Nothing here clears a stale token or logs in again on its own;
callers react to ``JWT_EXPIRED`` by calling :meth:`authenticate`.
"""

import requests

from featherclient.core.exceptions import ErrorKind, FeatherError
from featherclient.core.models import AuthenticationCredentials, RequestDescriptor
from featherclient.rest.errors import INVALID_LOGIN_MESSAGE, error_envelope
from featherclient.rest.pipeline import RequestPipeline

AUTHENTICATION_SERVICE = "authentication"
DEFAULT_PROBE_SERVICE = "users"


class AuthenticationManager:
    """Obtains and validates access tokens through a :class:`RequestPipeline`.

    Args:
        pipeline: The pipeline shared with the owning client.  Its token
            store receives the token after a successful login.
    """

    def __init__(self, pipeline: RequestPipeline):
        self.pipeline = pipeline

    def authenticate(
        self,
        username: str,
        password: str,
        strategy: str = "local",
        username_field: str = "email",
    ) -> dict:
        """Log in with a username and password.

        *username* can be an email, a phone number, etc.; *username_field*
        must name the field the server's *strategy* expects.

        Args:
            username: Value sent under *username_field*.
            password: The account password.
            strategy: Authentication strategy (``"local"`` by default).
            username_field: Body key carrying *username*.

        Returns:
            The ``user`` record returned by the server.

        Raises:
            FeatherError: ``INVALID_CREDENTIALS`` on a 401 with
                ``"Invalid login"``, ``INVALID_STRATEGY`` on any other 401,
                ``CANNOT_SEND_REQUEST`` when the server is unreachable, and
                ``UNKNOWN_ERROR`` otherwise.
        """
        credentials = AuthenticationCredentials(
            username=username,
            password=password,
            strategy=strategy,
            username_field=username_field,
        )
        descriptor = RequestDescriptor(
            method="POST",
            service=AUTHENTICATION_SERVICE,
            body=credentials.as_payload(),
        )

        try:
            response = self.pipeline.send(descriptor)
        except requests.RequestException as e:
            raise self._login_error(e) from e

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise FeatherError(ErrorKind.UNKNOWN_ERROR, response)

        token = data.get("accessToken")
        if not token:
            raise FeatherError(ErrorKind.UNKNOWN_ERROR, data.get("message"))

        self.pipeline.token_store.save_access_token(
            token, client=self.pipeline.client_tag
        )
        return data.get("user")

    def re_authenticate(self, service: str = DEFAULT_PROBE_SERVICE) -> bool:
        """Check whether the stored token is still accepted.

        Issues ``GET /{service}?$limit=1`` with the stored token.  *service*
        should be one that rejects anonymous callers.  The stored token is
        never modified.

        Args:
            service: The service used as a probe.

        Returns:
            ``True`` when the server accepts the token.

        Raises:
            FeatherError: ``JWT_EXPIRED`` on HTTP 401, ``UNKNOWN_ERROR`` on
                any other status or when no response was received, and
                ``SERVER_ERROR`` when the transport failed after a response
                arrived.
        """
        descriptor = RequestDescriptor(
            method="GET", service=service, query={"$limit": 1}
        )
        try:
            response = self.pipeline.send(descriptor, raise_for_status=False)
        except requests.RequestException as e:
            if e.response is not None:
                raise FeatherError(ErrorKind.SERVER_ERROR, e.response) from e
            raise FeatherError(ErrorKind.UNKNOWN_ERROR, e) from e

        if response.status_code == 200:
            return True
        if response.status_code == 401:
            raise FeatherError(ErrorKind.JWT_EXPIRED, error_envelope(response))
        raise FeatherError(ErrorKind.UNKNOWN_ERROR, error_envelope(response))

    # -------------------------
    # Internal helpers
    # -------------------------

    @staticmethod
    def _login_error(exc: requests.RequestException) -> FeatherError:
        """Map a failed login exchange to the login-specific kinds."""
        response = exc.response
        if response is None:
            return FeatherError(ErrorKind.CANNOT_SEND_REQUEST, str(exc))

        envelope = error_envelope(response)
        if response.status_code == 401 or envelope.get("code") == 401:
            # Lets callers tell a wrong password from a misconfigured strategy.
            if envelope.get("message") == INVALID_LOGIN_MESSAGE:
                return FeatherError(
                    ErrorKind.INVALID_CREDENTIALS, envelope.get("message")
                )
            return FeatherError(
                ErrorKind.INVALID_STRATEGY, envelope.get("message")
            )
        return FeatherError(ErrorKind.UNKNOWN_ERROR, response)

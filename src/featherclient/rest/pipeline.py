"""Request dispatch around a :class:`requests.Session`.

Every call goes through three hooks:

1. **Pre-request** — the current access token is read from the
   :class:`~featherclient.auth.interfaces.TokenStore` and turned into an
   ``Authorization`` header, merged with ``Accept`` and the configured
   extra headers.  The headers are computed per call and passed
   explicitly to the transport; the session headers are never mutated, so
   a call already in flight keeps the token it was sent with and clients
   sharing one session do not see each other's headers.  Nested query
   values and multipart fields are flattened into bracket keys.
2. **Response** — successful responses are returned unchanged.
3. **Error** — non-2xx responses raise :class:`requests.HTTPError` and
   transport failures propagate as :class:`requests.RequestException`.
   Classification is left to :mod:`featherclient.rest.errors`.
"""

import logging
from collections.abc import Callable
from typing import Any

import requests

from featherclient.auth.interfaces import DEFAULT_CLIENT_TAG, TokenStore
from featherclient.core.exceptions import ErrorKind, FeatherError
from featherclient.core.models import RequestDescriptor
from featherclient.rest.encoding import flatten

logger = logging.getLogger("featherclient")

LogHook = Callable[[str, dict[str, Any]], None]

EMPTY_BODY_MESSAGE = "Response body is empty"
INVALID_BODY_MESSAGE = "Response body is not valid JSON"


def authorization_header(token: str | None) -> dict[str, str]:
    """Return the ``Authorization`` header for *token*.

    The header is sent even without a token, as a bare ``Bearer``
    prefix, so the server always sees the same header set.
    """
    return {"Authorization": f"Bearer {token or ''}"}


def request_headers(
    token: str | None, extra_headers: dict[str, str] | None = None
) -> dict[str, str]:
    """Return every header sent with one request.

    ``Authorization`` always wins over a same-named extra header.
    """
    headers = {"Accept": "application/json"}
    headers.update(extra_headers or {})
    headers.update(authorization_header(token))
    return headers


class RequestPipeline:
    """Sends :class:`RequestDescriptor` instances to the backend.

    Args:
        base_url: Root URL of the backend.
        token_store: Source of the bearer token.
        session: Transport session.  A new :class:`requests.Session` is
            created (and owned) when ``None``.
        extra_headers: Headers sent with every request.
        timeout: Per-request timeout in seconds passed to the transport.
        debug: When ``True``, request, response, and error events are
            emitted through :meth:`_emit`.
        log_hook: Receives ``(event, fields)`` for each debug event.  When
            ``None``, events go to the ``featherclient`` logger at DEBUG.
        client_tag: Key under which the token is read from the store.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        session: requests.Session | None = None,
        extra_headers: dict[str, str] | None = None,
        timeout: float | None = None,
        debug: bool = False,
        log_hook: LogHook | None = None,
        client_tag: str = DEFAULT_CLIENT_TAG,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.timeout = timeout
        self.debug = debug
        self.log_hook = log_hook
        self.client_tag = client_tag
        self.extra_headers = dict(extra_headers or {})

        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def send(
        self,
        descriptor: RequestDescriptor,
        raise_for_status: bool = True,
    ) -> requests.Response:
        """Dispatch *descriptor* and return the raw response.

        Args:
            descriptor: The call to perform.
            raise_for_status: When ``False``, non-2xx responses are
                returned instead of raised.

        Returns:
            The :class:`requests.Response` from the transport.

        Raises:
            requests.HTTPError: On a non-2xx status, unless
                *raise_for_status* is ``False``.
            requests.RequestException: When no response was received.
        """
        token = self.token_store.get_access_token(self.client_tag)
        kwargs: dict[str, Any] = {
            "headers": request_headers(token, self.extra_headers),
            "timeout": self.timeout,
        }
        if descriptor.query is not None:
            kwargs["params"] = flatten(descriptor.query)
        if descriptor.is_multipart:
            kwargs["data"] = flatten(descriptor.multipart.fields)
            kwargs["files"] = descriptor.multipart.files
        elif descriptor.body is not None:
            kwargs["json"] = descriptor.body

        url = f"{self.base_url}{descriptor.path}"
        self._emit(
            "request",
            method=descriptor.method,
            url=url,
            query=kwargs.get("params"),
            multipart=descriptor.is_multipart,
            authenticated=token is not None,
        )

        try:
            response = self.session.request(descriptor.method, url, **kwargs)
            if raise_for_status:
                response.raise_for_status()
        except requests.RequestException as e:
            failed = getattr(e, "response", None)
            self._emit(
                "error",
                method=descriptor.method,
                url=url,
                status=getattr(failed, "status_code", None),
                error=str(e),
            )
            raise

        self._emit(
            "response",
            method=descriptor.method,
            url=url,
            status=response.status_code,
        )
        return response

    @staticmethod
    def decode(response: requests.Response) -> Any:
        """Return the JSON payload of a successful *response*.

        Raises:
            FeatherError: ``SERVER_ERROR`` when the body is empty, JSON
                ``null``, or not JSON at all.
        """
        if not response.content or not response.content.strip():
            raise FeatherError(ErrorKind.SERVER_ERROR, EMPTY_BODY_MESSAGE)
        try:
            data = response.json()
        except ValueError:
            raise FeatherError(
                ErrorKind.SERVER_ERROR, INVALID_BODY_MESSAGE
            ) from None
        if data is None:
            raise FeatherError(ErrorKind.SERVER_ERROR, EMPTY_BODY_MESSAGE)
        return data

    def close(self) -> None:
        """Close the session if this pipeline created it."""
        if self._owns_session:
            self.session.close()

    # -------------------------
    # Internal helpers
    # -------------------------

    def _emit(self, event: str, **fields: Any) -> None:
        if not self.debug:
            return
        if self.log_hook is not None:
            self.log_hook(event, fields)
        else:
            logger.debug("%s %s", event, fields)

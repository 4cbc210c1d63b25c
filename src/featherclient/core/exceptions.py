"""Domain exceptions for the featherclient library."""

from enum import Enum
from typing import Any


class FeatherClientError(Exception):
    """Base class for all featherclient library exceptions."""


class ErrorKind(str, Enum):
    """Closed set of failure categories surfaced to callers."""

    JWT_EXPIRED = "jwt_expired"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_STRATEGY = "invalid_strategy"
    SERVER_ERROR = "server_error"
    CANNOT_SEND_REQUEST = "cannot_send_request"
    FORM_DATA_ERROR = "form_data_error"
    UNKNOWN_ERROR = "unknown_error"


class FeatherError(FeatherClientError):
    """Raised for every failed client operation.

    Callers branch on :attr:`kind` rather than on exception subclasses.
    The original server or transport payload is kept in :attr:`detail`
    for diagnostics.

    Attributes:
        kind: The :class:`ErrorKind` of the failure.
        detail: A message string, a decoded error envelope, a
            :class:`requests.Response`, or the underlying exception.
    """

    def __init__(self, kind: ErrorKind, detail: Any = None):
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.value}: {self.message}")

    @property
    def message(self) -> str:
        """Return a human-readable message extracted from :attr:`detail`."""
        detail = self.detail
        if isinstance(detail, dict):
            return str(detail.get("message", detail))
        if detail is None:
            return ""
        status = getattr(detail, "status_code", None)
        if status is not None:
            return f"HTTP {status}"
        return str(detail)

    @property
    def code(self) -> int | None:
        """Return the envelope or HTTP status code, when known."""
        detail = self.detail
        if isinstance(detail, dict):
            code = detail.get("code")
            return code if isinstance(code, int) else None
        status = getattr(detail, "status_code", None)
        if isinstance(status, int):
            return status
        response = getattr(detail, "response", None)
        status = getattr(response, "status_code", None)
        return status if isinstance(status, int) else None

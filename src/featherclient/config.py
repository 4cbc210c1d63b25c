"""Client configuration.

Values are resolved in this order (first match wins):

1. Keyword arguments passed to :meth:`ClientConfig.from_env`.
2. ``FEATHERS_*`` environment variables.
3. Built-in defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from featherclient.auth.credentials import default_token_path
from featherclient.auth.interfaces import DEFAULT_CLIENT_TAG

_ENV_BASE_URL = "FEATHERS_BASE_URL"
_ENV_TIMEOUT = "FEATHERS_TIMEOUT"
_ENV_DEBUG = "FEATHERS_DEBUG"
_ENV_TOKEN_PATH = "FEATHERS_TOKEN_PATH"

_TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_TIMEOUT = 30.0


def token_path_from_env() -> Path:
    """Return the token file path from ``FEATHERS_TOKEN_PATH`` or the default."""
    token_path = os.getenv(_ENV_TOKEN_PATH)
    if token_path:
        return Path(token_path).expanduser()
    return default_token_path()


@dataclass
class ClientConfig:
    """Settings for one :class:`~featherclient.rest.client.RestClient`.

    Attributes:
        base_url: Root URL of the backend, e.g. ``https://api.example.com``.
        extra_headers: Headers sent with every request.
        timeout: Per-request transport timeout in seconds.
        debug: When ``True``, the pipeline emits request/response events.
        token_path: Location of the token file used by the default store.
        client_tag: Key under which the access token is stored.
    """

    base_url: str
    extra_headers: dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False
    token_path: Path = field(default_factory=default_token_path)
    client_tag: str = DEFAULT_CLIENT_TAG

    def __post_init__(self):
        if not self.base_url:
            raise ValueError(
                "A base URL is required. "
                f"Pass base_url or set {_ENV_BASE_URL}."
            )
        self.base_url = self.base_url.rstrip("/")
        self.token_path = Path(self.token_path)

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """Build a configuration from the environment.

        Args:
            **overrides: Field values that take precedence over the
                environment.  ``None`` values are ignored.

        Returns:
            A :class:`ClientConfig` instance.

        Raises:
            ValueError: If no base URL is available or a numeric variable
                cannot be parsed.
        """
        values: dict = {}

        base_url = os.getenv(_ENV_BASE_URL)
        if base_url:
            values["base_url"] = base_url

        timeout = os.getenv(_ENV_TIMEOUT)
        if timeout:
            try:
                values["timeout"] = float(timeout)
            except ValueError:
                raise ValueError(
                    f"{_ENV_TIMEOUT} must be a number, got {timeout!r}"
                ) from None

        debug = os.getenv(_ENV_DEBUG)
        if debug:
            values["debug"] = debug.strip().lower() in _TRUTHY

        values["token_path"] = token_path_from_env()

        values.update({k: v for k, v in overrides.items() if v is not None})
        values.setdefault("base_url", "")
        return cls(**values)

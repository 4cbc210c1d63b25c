"""Token storage backends.

* :class:`JsonFileTokenStore` keeps tokens in
  ``~/.config/featherclient/tokens.json`` as ``{client_tag: token}``, with
  permissions restricted to the owner (0o600).
* :class:`MemoryTokenStore` keeps tokens for the lifetime of the process.
"""

import json
from pathlib import Path

from featherclient.auth.interfaces import DEFAULT_CLIENT_TAG, TokenStore

_CONFIG_DIR = Path.home() / ".config" / "featherclient"
_TOKENS_FILE = _CONFIG_DIR / "tokens.json"


def default_token_path() -> Path:
    """Return the default path of the token file.

    Returns:
        A :class:`pathlib.Path` pointing to the tokens JSON file.
    """
    return _TOKENS_FILE


class JsonFileTokenStore(TokenStore):
    """Stores access tokens in a JSON file readable only by its owner.

    Args:
        path: Location of the token file.  Defaults to
            ``~/.config/featherclient/tokens.json``.
    """

    def __init__(self, path: Path | str | None = None):
        self._path = Path(path) if path is not None else _TOKENS_FILE

    @property
    def path(self) -> Path:
        return self._path

    def get_access_token(
        self, client: str = DEFAULT_CLIENT_TAG
    ) -> str | None:
        """Return the token stored under *client*, or ``None``.

        A missing or corrupt file reads as "no token".
        """
        token = self._load().get(client)
        return token if isinstance(token, str) and token else None

    def save_access_token(
        self, token: str, client: str = DEFAULT_CLIENT_TAG
    ) -> None:
        """Persist *token* under *client*.

        Creates the parent directory if it does not already exist and
        restricts file permissions to the owner only.
        """
        tokens = self._load()
        tokens[client] = token
        self._write(tokens)

    def clear_access_token(self, client: str = DEFAULT_CLIENT_TAG) -> bool:
        tokens = self._load()
        if client not in tokens:
            return False
        del tokens[client]
        if tokens:
            self._write(tokens)
        else:
            self._path.unlink(missing_ok=True)
        return True

    # -------------------------
    # Internal helpers
    # -------------------------

    def _load(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, tokens: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(tokens, indent=2), encoding="utf-8")
        self._path.chmod(0o600)


class MemoryTokenStore(TokenStore):
    """Process-local token store, useful for scripts and tests."""

    def __init__(self, token: str | None = None):
        self._tokens: dict[str, str] = {}
        if token is not None:
            self._tokens[DEFAULT_CLIENT_TAG] = token

    def get_access_token(
        self, client: str = DEFAULT_CLIENT_TAG
    ) -> str | None:
        """Return the token held for *client*, or ``None``."""
        return self._tokens.get(client)

    def save_access_token(
        self, token: str, client: str = DEFAULT_CLIENT_TAG
    ) -> None:
        """Hold *token* for *client*, replacing any previous one."""
        self._tokens[client] = token

    def clear_access_token(self, client: str = DEFAULT_CLIENT_TAG) -> bool:
        """Forget the token of *client*.

        Returns:
            ``True`` if a token was removed.
        """
        return self._tokens.pop(client, None) is not None

"""Authentication layer — token store interface and storage backends."""

from featherclient.auth.credentials import JsonFileTokenStore, MemoryTokenStore
from featherclient.auth.interfaces import TokenStore

__all__ = ["JsonFileTokenStore", "MemoryTokenStore", "TokenStore"]

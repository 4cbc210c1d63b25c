"""Client for REST backends following the Feathers conventions."""

from featherclient.auth import JsonFileTokenStore, MemoryTokenStore, TokenStore
from featherclient.config import ClientConfig
from featherclient.core.exceptions import ErrorKind, FeatherClientError, FeatherError
from featherclient.core.models import FileUpload
from featherclient.rest.client import RestClient

__all__ = [
    "ClientConfig",
    "ErrorKind",
    "FeatherClientError",
    "FeatherError",
    "FileUpload",
    "JsonFileTokenStore",
    "MemoryTokenStore",
    "RestClient",
    "TokenStore",
]

"""Feathers REST provider package."""

from featherclient.rest.auth import AuthenticationManager
from featherclient.rest.client import RestClient
from featherclient.rest.pipeline import RequestPipeline

__all__ = ["AuthenticationManager", "RequestPipeline", "RestClient"]

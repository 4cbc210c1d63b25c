"""Service layer — clients bound to one service path."""

from featherclient.services.service import Service

__all__ = ["Service"]

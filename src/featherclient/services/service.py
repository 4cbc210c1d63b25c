"""A client bound to a single service path."""

from collections.abc import Mapping
from typing import Any

from featherclient.rest.client import RestClient


class Service:
    """Exposes the CRUD methods of one service, e.g. ``messages``.

    Delegates every call to the injected :class:`RestClient` so that error
    handling and authentication stay in one place.
    """

    def __init__(self, client: RestClient, name: str):
        """Initialise the service.

        Args:
            client: The client that performs the requests.
            name: Service path without leading slash.
        """
        self.client = client
        self.name = name.strip("/")

    def find(self, query: Mapping[str, Any] | None = None) -> Any:
        """List resources of this service.

        Args:
            query: Feathers query, e.g. ``{"$limit": 10}``.

        Returns:
            The server payload, typically ``{total, limit, skip, data}``.
        """
        return self.client.find(self.name, query)

    def get(self, object_id: str | int) -> Any:
        """Fetch one resource.

        Args:
            object_id: Identifier of the resource.

        Returns:
            The resource as sent by the server.
        """
        return self.client.get(self.name, object_id)

    def create(self, data: Mapping[str, Any], **upload) -> Any:
        """Create a resource.

        Args:
            data: Resource fields.
            **upload: ``contains_file``, ``file_field_name`` and ``files``,
                as accepted by :meth:`RestClient.create`.
        """
        return self.client.create(self.name, data, **upload)

    def update(self, object_id: str | int, data: Mapping[str, Any], **upload) -> Any:
        """Replace a resource.

        Args:
            object_id: Identifier of the resource.
            data: The complete new resource.
            **upload: As accepted by :meth:`RestClient.update`.

        Returns:
            The updated resource.
        """
        return self.client.update(self.name, object_id, data, **upload)

    def patch(self, object_id: str | int, data: Mapping[str, Any], **upload) -> Any:
        """Merge fields into a resource.

        Args:
            object_id: Identifier of the resource.
            data: Fields to change.
            **upload: As accepted by :meth:`RestClient.patch`.

        Returns:
            The patched resource.
        """
        return self.client.patch(self.name, object_id, data, **upload)

    def remove(self, object_id: str | int) -> Any:
        """Delete a resource.

        Args:
            object_id: Identifier of the resource.

        Returns:
            The removed resource.
        """
        return self.client.remove(self.name, object_id)

    def __repr__(self) -> str:
        return f"Service({self.name!r})"

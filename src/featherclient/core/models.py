"""Data model dataclasses shared across the client layers."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


# ----------------------
# Authentication
# ----------------------


@dataclass
class AuthenticationCredentials:
    """Login material for one ``POST /authentication`` call.

    Never persisted; built per call and discarded.
    """

    username: str
    password: str
    strategy: str = "local"
    username_field: str = "email"
    """Body key that carries ``username`` (``email``, ``phone``, ...)."""

    def as_payload(self) -> dict[str, str]:
        """Return the JSON body expected by the authentication service."""
        return {
            "strategy": self.strategy,
            self.username_field: self.username,
            "password": self.password,
        }


# ----------------------
# File uploads
# ----------------------


@dataclass(frozen=True)
class FileUpload:
    """A local file to attach to a multipart request."""

    file_path: str
    file_name: str

    @classmethod
    def from_path(cls, path: str | os.PathLike) -> "FileUpload":
        """Build an upload whose file name is the basename of *path*."""
        path = os.fspath(path)
        return cls(file_path=path, file_name=os.path.basename(path))

    @classmethod
    def coerce(cls, value: Any) -> "FileUpload":
        """Accept a :class:`FileUpload` or a mapping describing one.

        Mappings may use ``file_path``/``file_name`` or the camel-case
        ``filePath``/``fileName`` keys.

        Raises:
            ValueError: If *value* cannot be interpreted as an upload.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            path = value.get("file_path", value.get("filePath"))
            name = value.get("file_name", value.get("fileName"))
            if path and name:
                return cls(file_path=str(path), file_name=str(name))
            if path:
                return cls.from_path(path)
        raise ValueError(f"Invalid file upload entry: {value!r}")


@dataclass
class MultipartBody:
    """A multipart payload in the shape ``requests`` accepts.

    ``fields`` is passed as ``data=`` and ``files`` as ``files=``.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    files: list[tuple[str, tuple[str, bytes, str]]] = field(
        default_factory=list
    )


# ----------------------
# Requests
# ----------------------


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything the pipeline needs to dispatch one call."""

    method: str
    service: str
    object_id: str | None = None
    query: Mapping[str, Any] | None = None
    body: Any = None
    multipart: MultipartBody | None = None

    @property
    def path(self) -> str:
        """Return ``/{service}`` or ``/{service}/{object_id}``."""
        service = self.service.strip("/")
        if self.object_id is None:
            return f"/{service}"
        return f"/{service}/{self.object_id}"

    @property
    def is_multipart(self) -> bool:
        return self.multipart is not None

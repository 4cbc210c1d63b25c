"""Multipart body assembly for file uploads."""

import mimetypes
from collections.abc import Iterable, Mapping
from typing import Any

from featherclient.core.exceptions import ErrorKind, FeatherError
from featherclient.core.models import FileUpload, MultipartBody

DEFAULT_FILE_FIELD = "file"


def build(
    fields: Mapping[str, Any] | None,
    file_field_name: str = DEFAULT_FILE_FIELD,
    files: Iterable[FileUpload | Mapping] | None = None,
) -> MultipartBody:
    """Assemble a multipart body from scalar fields and local files.

    Scalar fields are copied verbatim.  Every file is appended under
    *file_field_name* in input order, so several files share one field
    name.  All files are read before the body is returned: either every
    attachment is present or a :class:`FeatherError` is raised.

    Args:
        fields: Non-file form fields.
        file_field_name: Form field that carries the file(s).
        files: :class:`FileUpload` instances, or mappings with
            ``file_path``/``file_name`` keys.

    Returns:
        A :class:`MultipartBody` ready to be dispatched.

    Raises:
        FeatherError: ``FORM_DATA_ERROR`` if *files* is missing or empty,
            an entry is malformed, or a file cannot be read.
    """
    if not files:
        raise FeatherError(
            ErrorKind.FORM_DATA_ERROR,
            "At least one file is required for a multipart request",
        )

    attachments: list[tuple[str, tuple[str, bytes, str]]] = []
    for entry in files:
        try:
            upload = FileUpload.coerce(entry)
            with open(upload.file_path, "rb") as fh:
                content = fh.read()
        except (ValueError, OSError) as e:
            raise FeatherError(ErrorKind.FORM_DATA_ERROR, e) from e
        content_type = (
            mimetypes.guess_type(upload.file_name)[0]
            or "application/octet-stream"
        )
        attachments.append(
            (file_field_name, (upload.file_name, content, content_type))
        )

    return MultipartBody(fields=dict(fields or {}), files=attachments)

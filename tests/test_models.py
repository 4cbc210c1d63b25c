"""Unit tests for core domain models and the error type."""

import pytest

from featherclient.core.exceptions import ErrorKind, FeatherClientError, FeatherError
from featherclient.core.models import (
    AuthenticationCredentials,
    FileUpload,
    RequestDescriptor,
)


class TestAuthenticationCredentials:
    def test_payload_uses_default_field(self):
        creds = AuthenticationCredentials(username="a@b.com", password="x")
        assert creds.as_payload() == {
            "strategy": "local",
            "email": "a@b.com",
            "password": "x",
        }

    def test_payload_uses_custom_field(self):
        creds = AuthenticationCredentials(
            username="alice", password="x", username_field="username"
        )
        assert creds.as_payload()["username"] == "alice"
        assert "email" not in creds.as_payload()


class TestRequestDescriptor:
    def test_collection_path(self):
        assert RequestDescriptor("GET", "messages").path == "/messages"

    def test_resource_path(self):
        descriptor = RequestDescriptor("GET", "/messages/", object_id="7")
        assert descriptor.path == "/messages/7"

    def test_is_not_multipart_by_default(self):
        assert RequestDescriptor("POST", "messages", body={}).is_multipart is False


class TestFileUpload:
    def test_from_path_uses_basename(self, tmp_path):
        upload = FileUpload.from_path(tmp_path / "logo.png")
        assert upload.file_name == "logo.png"
        assert upload.file_path == str(tmp_path / "logo.png")

    def test_coerce_snake_case_mapping(self):
        upload = FileUpload.coerce({"file_path": "/a/b.png", "file_name": "c.png"})
        assert upload == FileUpload("/a/b.png", "c.png")

    def test_coerce_rejects_garbage(self):
        with pytest.raises(ValueError):
            FileUpload.coerce(42)


class TestFeatherError:
    def test_is_library_error(self):
        assert issubclass(FeatherError, FeatherClientError)

    def test_message_from_string_detail(self):
        error = FeatherError(ErrorKind.SERVER_ERROR, "Response body is empty")
        assert error.message == "Response body is empty"
        assert error.code is None
        assert str(error) == "server_error: Response body is empty"

    def test_message_and_code_from_envelope(self):
        error = FeatherError(
            ErrorKind.JWT_EXPIRED, {"code": 401, "message": "jwt expired"}
        )
        assert error.message == "jwt expired"
        assert error.code == 401

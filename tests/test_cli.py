"""Unit tests for CLI commands.

All tests use Typer's CliRunner and mock _get_client so that no real
HTTP requests are made.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from featherclient.auth.credentials import JsonFileTokenStore
from featherclient.core.exceptions import ErrorKind, FeatherError
from featherclient.core.models import FileUpload
from featherclient_cli.main import app

runner = CliRunner()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_client():
    client = MagicMock()
    client.pipeline.client_tag = "rest"
    client.token_store.get_access_token.return_value = "T1"
    return client


def _invoke(client, args):
    with patch("featherclient_cli.main._get_client", return_value=client):
        return runner.invoke(app, args)


# ---------------------------------------------------------------------------
# auth commands
# ---------------------------------------------------------------------------


def test_login_prints_user(mock_client):
    mock_client.authenticate.return_value = {"id": 1}
    result = _invoke(
        mock_client, ["auth", "login", "a@b.com", "--password", "x"]
    )
    assert result.exit_code == 0
    mock_client.authenticate.assert_called_once_with(
        "a@b.com", "x", strategy="local", username_field="email"
    )
    assert '"id": 1' in result.output


def test_login_invalid_credentials_exits_1(mock_client):
    mock_client.authenticate.side_effect = FeatherError(
        ErrorKind.INVALID_CREDENTIALS, "Invalid login"
    )
    result = _invoke(
        mock_client, ["auth", "login", "a@b.com", "--password", "bad"]
    )
    assert result.exit_code == 1
    assert "invalid_credentials" in result.output


def test_status_valid_token(mock_client):
    mock_client.re_authenticate.return_value = True
    result = _invoke(mock_client, ["auth", "status"])
    assert result.exit_code == 0
    assert "Token is valid" in result.output
    mock_client.re_authenticate.assert_called_once_with("users")


def test_status_expired_token(mock_client):
    mock_client.re_authenticate.side_effect = FeatherError(
        ErrorKind.JWT_EXPIRED, {"code": 401, "message": "jwt expired"}
    )
    result = _invoke(mock_client, ["auth", "status", "--service", "messages"])
    assert result.exit_code == 1
    assert "expired" in result.output


def test_status_without_token(mock_client):
    mock_client.token_store.get_access_token.return_value = None
    result = _invoke(mock_client, ["auth", "status"])
    assert result.exit_code == 1
    mock_client.re_authenticate.assert_not_called()


def test_clear_removes_stored_token(monkeypatch, tmp_path):
    path = tmp_path / "tokens.json"
    monkeypatch.setenv("FEATHERS_TOKEN_PATH", str(path))
    JsonFileTokenStore(path).save_access_token("T1")

    result = runner.invoke(app, ["auth", "clear"])
    assert result.exit_code == 0
    assert "Token removed" in result.output
    assert JsonFileTokenStore(path).get_access_token() is None

    result = runner.invoke(app, ["auth", "clear"])
    assert "No saved token" in result.output


# ---------------------------------------------------------------------------
# service commands
# ---------------------------------------------------------------------------


def test_find_json_output(mock_client):
    mock_client.find.return_value = {"total": 1, "data": [{"id": 1}]}
    result = _invoke(
        mock_client,
        ["service", "find", "messages", "-q", "$limit=10", "-q", "userId=3"],
    )
    assert result.exit_code == 0
    mock_client.find.assert_called_once_with(
        "messages", {"$limit": "10", "userId": "3"}
    )
    assert json.loads(result.output)["total"] == 1


def test_find_rejects_bad_query(mock_client):
    result = _invoke(mock_client, ["service", "find", "messages", "-q", "oops"])
    assert result.exit_code == 1
    mock_client.find.assert_not_called()


def test_get_prints_resource(mock_client):
    mock_client.get.return_value = {"id": 7}
    result = _invoke(mock_client, ["service", "get", "messages", "7"])
    assert result.exit_code == 0
    mock_client.get.assert_called_once_with("messages", "7")


def test_create_with_files(mock_client, tmp_path):
    path = tmp_path / "a.png"
    path.write_bytes(b"a")
    mock_client.create.return_value = {"id": 1}
    result = _invoke(
        mock_client,
        [
            "service",
            "create",
            "uploads",
            "--data",
            '{"title": "x"}',
            "--file",
            str(path),
            "--field",
            "images",
        ],
    )
    assert result.exit_code == 0
    mock_client.create.assert_called_once_with(
        "uploads",
        {"title": "x"},
        contains_file=True,
        file_field_name="images",
        files=[FileUpload(str(path), "a.png")],
    )


def test_create_rejects_invalid_data(mock_client):
    result = _invoke(
        mock_client, ["service", "create", "messages", "--data", "[1, 2]"]
    )
    assert result.exit_code == 1
    mock_client.create.assert_not_called()


def test_update_without_files(mock_client):
    mock_client.update.return_value = {"id": 7}
    result = _invoke(
        mock_client,
        ["service", "update", "messages", "7", "--data", '{"text": "y"}'],
    )
    assert result.exit_code == 0
    mock_client.update.assert_called_once_with(
        "messages",
        "7",
        {"text": "y"},
        contains_file=False,
        file_field_name="file",
        files=[],
    )


def test_patch_and_remove(mock_client):
    mock_client.patch.return_value = {"id": 7}
    mock_client.remove.return_value = {"id": 7}
    assert _invoke(
        mock_client, ["service", "patch", "messages", "7", "-d", "{}"]
    ).exit_code == 0
    assert _invoke(mock_client, ["service", "remove", "messages", "7"]).exit_code == 0
    mock_client.remove.assert_called_once_with("messages", "7")


def test_service_error_exits_1(mock_client):
    mock_client.get.side_effect = FeatherError(
        ErrorKind.SERVER_ERROR, "Response body is empty"
    )
    result = _invoke(mock_client, ["service", "get", "messages", "7"])
    assert result.exit_code == 1
    assert "Response body is empty" in result.output

"""Unit tests for client configuration."""

from pathlib import Path

import pytest

from featherclient.config import DEFAULT_TIMEOUT, ClientConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "FEATHERS_BASE_URL",
        "FEATHERS_TIMEOUT",
        "FEATHERS_DEBUG",
        "FEATHERS_TOKEN_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = ClientConfig(base_url="https://api.example.com/")
    assert config.base_url == "https://api.example.com"
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.debug is False
    assert config.client_tag == "rest"
    assert config.token_path.name == "tokens.json"


def test_base_url_is_required():
    with pytest.raises(ValueError):
        ClientConfig.from_env()


def test_values_come_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("FEATHERS_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("FEATHERS_TIMEOUT", "12.5")
    monkeypatch.setenv("FEATHERS_DEBUG", "yes")
    monkeypatch.setenv("FEATHERS_TOKEN_PATH", str(tmp_path / "t.json"))

    config = ClientConfig.from_env()
    assert config.base_url == "https://env.example.com"
    assert config.timeout == 12.5
    assert config.debug is True
    assert config.token_path == Path(tmp_path / "t.json")


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("FEATHERS_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("FEATHERS_DEBUG", "0")
    config = ClientConfig.from_env(
        base_url="https://arg.example.com", debug=True, timeout=None
    )
    assert config.base_url == "https://arg.example.com"
    assert config.debug is True
    assert config.timeout == DEFAULT_TIMEOUT


def test_invalid_timeout(monkeypatch):
    monkeypatch.setenv("FEATHERS_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("FEATHERS_TIMEOUT", "soon")
    with pytest.raises(ValueError, match="FEATHERS_TIMEOUT"):
        ClientConfig.from_env()

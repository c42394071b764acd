"""Configuration loading tests."""

from __future__ import annotations

import pytest

from plausible_mcp.config import load_settings
from plausible_mcp.errors import StartupError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and any local .env file."""
    monkeypatch.chdir(tmp_path)
    for var in ("PLAUSIBLE_API_URL", "PLAUSIBLE_API_KEY", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


def test_defaults_with_token(monkeypatch):
    monkeypatch.setenv("PLAUSIBLE_API_KEY", "secret")

    settings = load_settings()

    assert settings.plausible_api_key == "secret"
    assert settings.plausible_api_url == "https://plausible.io/api/v2"
    assert settings.log_level == "INFO"
    assert settings.mcp_server_name == "plausible-model-context-protocol-server"


def test_base_url_override(monkeypatch):
    monkeypatch.setenv("PLAUSIBLE_API_KEY", "secret")
    monkeypatch.setenv("PLAUSIBLE_API_URL", "https://stats.example.org/api/v2")

    assert load_settings().plausible_api_url == "https://stats.example.org/api/v2"


def test_missing_token_is_startup_error():
    """No PLAUSIBLE_API_KEY at all must abort startup."""
    with pytest.raises(StartupError) as exc_info:
        load_settings()

    assert "PLAUSIBLE_API_KEY" in str(exc_info.value)


def test_blank_token_is_startup_error(monkeypatch):
    monkeypatch.setenv("PLAUSIBLE_API_KEY", "   ")

    with pytest.raises(StartupError):
        load_settings()


def test_env_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("PLAUSIBLE_API_KEY=from-dotenv\n", encoding="utf-8")

    assert load_settings().plausible_api_key == "from-dotenv"


def test_log_level_is_normalised(monkeypatch):
    monkeypatch.setenv("PLAUSIBLE_API_KEY", "secret")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert load_settings().log_level == "DEBUG"


def test_unknown_log_level_is_startup_error(monkeypatch):
    monkeypatch.setenv("PLAUSIBLE_API_KEY", "secret")
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    with pytest.raises(StartupError) as exc_info:
        load_settings()

    assert "LOG_LEVEL" in str(exc_info.value)

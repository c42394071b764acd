"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging

import pydantic
from pydantic_settings import BaseSettings, SettingsConfigDict

from plausible_mcp.errors import StartupError


class Settings(BaseSettings):
    """Central settings pulled from .env / environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Plausible
    plausible_api_url: str = "https://plausible.io/api/v2"
    plausible_api_key: str
    """Bearer token for the Plausible Stats API. Required."""

    # App
    log_level: str = "INFO"

    # MCP
    mcp_server_name: str = "plausible-model-context-protocol-server"
    mcp_server_version: str = "0.0.1"

    # SSE transport
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 8000

    @pydantic.field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @pydantic.field_validator("plausible_api_key")
    @classmethod
    def _key_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("PLAUSIBLE_API_KEY must not be empty")
        return value


def load_settings(**overrides) -> Settings:
    """Build the process settings once at startup.

    A missing API key is fatal: it surfaces as ``StartupError`` rather than a
    per-call failure.
    """
    try:
        return Settings(**overrides)
    except pydantic.ValidationError as exc:
        missing = ", ".join(
            str(err["loc"][0]).upper() for err in exc.errors() if err.get("loc")
        )
        raise StartupError(f"Invalid configuration: {missing or exc}") from exc

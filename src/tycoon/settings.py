"""
Central application configuration using pydantic-settings.

This module provides typed access to environment-based configuration for:
- the remote game API (trades, property actions)
- trade polling cadence
- AI purchase heuristics
- the companion HTTP server
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """
    Configuration for the remote game service.

    Environment variables (prefix: TYCOON_API_):
        TYCOON_API_BASE_URL        - Base URL of the game REST API
        TYCOON_API_TIMEOUT_SECONDS - Request timeout in seconds (default: 10)
        TYCOON_API_AUTH_TOKEN      - Optional bearer token
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="TYCOON_API_",
    )

    base_url: str = Field(
        default="http://localhost:3000/api",
        description="Base URL of the game REST API.",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="HTTP request timeout in seconds.",
    )
    auth_token: Optional[SecretStr] = Field(
        default=None,
        description="Bearer token sent with every request, if set.",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, value: Optional[str]) -> str:
        if not value:
            return "http://localhost:3000/api"
        return value.rstrip("/")


class SyncSettings(BaseSettings):
    """
    Trade polling configuration.

    Environment variables (prefix: TRADE_SYNC_):
        TRADE_SYNC_POLL_INTERVAL_SECONDS - Seconds between trade polls (default: 5)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="TRADE_SYNC_",
    )

    poll_interval_seconds: float = Field(default=5.0, gt=0)


class AgentSettings(BaseSettings):
    """
    Thresholds for the automated purchase decision.

    Environment variables (prefix: AI_):
        AI_BUY_THRESHOLD       - Minimum buy score to purchase (default: 72)
        AI_BUY_CASH_MULTIPLIER - Cash must exceed price times this (default: 1.8)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="AI_",
    )

    buy_threshold: int = Field(default=72, ge=0, le=100)
    buy_cash_multiplier: float = Field(default=1.8, ge=0)


class ServerSettings(BaseSettings):
    """
    Configuration for the companion HTTP server.

    Environment variables:
        SERVER_HOST - Bind host (default: 127.0.0.1)
        SERVER_PORT - Bind port (default: 8000)
        LOG_LEVEL   - Root log level (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", alias="SERVER_HOST")
    port: int = Field(default=8000, alias="SERVER_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, value: Optional[str]) -> str:
        return (value or "INFO").upper()


@lru_cache
def get_api_settings() -> ApiSettings:
    """Return cached API settings instance."""
    return ApiSettings()


@lru_cache
def get_sync_settings() -> SyncSettings:
    """Return cached trade sync settings instance."""
    return SyncSettings()


@lru_cache
def get_agent_settings() -> AgentSettings:
    """Return cached AI agent settings instance."""
    return AgentSettings()


@lru_cache
def get_server_settings() -> ServerSettings:
    """Return cached server settings instance."""
    return ServerSettings()

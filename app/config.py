"""Application configuration settings."""
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Runtime toggles -----------------------------------------------------
# Execution environment: "dev" | "test" | "staging" | "prod"
ENV = os.getenv("APP_ENV", "dev").lower()


class Settings(BaseSettings):
    """Environment configuration for the station administration backend."""

    app_env: str = ENV
    database_url: str = "sqlite:///station.db"
    SECRET_KEY: str = "change-me"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    DB_ECHO: bool = False
    CORS_ALLOW_ORIGINS: list[str] = [
        "http://localhost:3000",
    ]
    ALLOW_DB_CREATE_ALL: bool = False
    SENTRY_DSN: str | None = None
    PROMETHEUS_ENABLED: bool = True

    # --- Backups ---------------------------------------------------------
    BACKUP_TIMEZONE: str = "UTC"
    BACKUP_EXCLUDED_TABLES: list[str] = ["alembic_version"]

    # --- Outbound notifications -----------------------------------------
    NOTIFY_WEBHOOK_URL: str | None = None
    NOTIFY_WEBHOOK_TIMEOUT_SECONDS: float = 5.0

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="", env_file_encoding="utf-8"
    )

    @field_validator("NOTIFY_WEBHOOK_URL", "SENTRY_DSN")
    @classmethod
    def _strip_empty(cls, value: str | None) -> str | None:
        """Normalise empty strings to ``None`` so feature checks stay simple."""

        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class AppInfo(BaseModel):
    name: str = "station-admin-backend"
    version: str = "0.1.0"


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return settings


__all__ = [
    "ENV",
    "Settings",
    "AppInfo",
    "settings",
    "get_settings",
]

"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./fanout.db",
        description="Database connection URL used by SQLAlchemy",
        min_length=1,
    )
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Base URL used to build notification deep links",
        min_length=1,
    )
    dedup_window_minutes: int = Field(
        default=5,
        description="Trailing window during which equivalent notifications are suppressed",
        gt=0,
    )
    notification_retention_days: int = Field(
        default=30,
        description="Age after which read or dismissed notifications are deleted",
        gt=0,
    )
    event_retention_days: int = Field(
        default=90,
        description="Age after which processed events expire from storage",
        gt=0,
    )
    recovery_max_attempts: int = Field(
        default=5,
        description="Processing attempts allowed before recovery gives up on an event",
        gt=0,
    )
    processing_lease_seconds: int = Field(
        default=300,
        description="Seconds a worker holds an event before another may take it over",
        gt=0,
    )
    recovery_on_startup: bool = Field(
        default=True,
        description="Resubmit unprocessed events when the application starts",
    )
    maintenance_interval_seconds: int = Field(
        default=3600,
        description="Seconds between retention sweeps; 0 disables the periodic task",
        ge=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used when rendering dates for readers",
    )
    log_level: str = Field(default="INFO", description="Root logging level")


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

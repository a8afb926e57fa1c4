"""All configuration via environment.

Take note of the environment variable prefixes required for each
settings class.
"""
from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Generic application settings.

    Prefix all environment variables with `CONTACT_STORE_`, e.g.,
    `CONTACT_STORE_EXCLUDED_CITY`.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTACT_STORE_", env_file=".env", case_sensitive=True, extra="ignore"
    )

    NAME: str = "contact-store"
    """Application name, bound to every log event."""
    EXCLUDED_CITY: str = "Springfield"
    """City used by the report when `--city` is not given."""
    DTO_INFO_KEY: str = "dto"
    """Key used on `mapped_column(info=...)` for DTO configuration."""


class DatabaseSettings(BaseSettings):
    """Configures the database for the application.

    Prefix all environment variables with `DB_`, e.g., `DB_URL`.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_", env_file=".env", case_sensitive=True, extra="ignore"
    )

    URL: str = "sqlite://"
    """SQLAlchemy URL, in-memory SQLite by default."""
    ECHO: bool = False
    """Enable SQLAlchemy engine logs."""


class LogSettings(BaseSettings):
    """Logging config for the application.

    Prefix all environment variables with `LOG_`, e.g., `LOG_LEVEL`.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_", env_file=".env", case_sensitive=True, extra="ignore"
    )

    LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    """Stdlib log level name."""
    FORMAT: Literal["console", "json"] = "console"
    """Renderer used for log output."""


app = AppSettings()
db = DatabaseSettings()
log = LogSettings()

"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- Defaults to SQLite (file-based) for easy local development
- Counter and registration behaviour are tunable without code changes
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Project Configuration
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ...)"
    )

    # Server Configuration
    HOST: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    PORT: int = Field(default=3000, description="Port uvicorn listens on")

    # Database Configuration
    # For SQLite: sqlite+aiosqlite:///./shorturl.db (default)
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./shorturl.db",
        description="Async database connection string"
    )
    SQLITE_BUSY_TIMEOUT: float = Field(
        default=30.0,
        description="Seconds a writer waits for the SQLite database lock before failing"
    )
    CREATE_TABLES_ON_STARTUP: bool = Field(
        default=True,
        description="Create missing tables on startup (disable when alembic owns the schema)"
    )

    # Counter Configuration
    COUNTER_NAME: str = Field(
        default="url_entries",
        description="Name of the counter row that issues short codes"
    )
    COUNTER_START: int = Field(
        default=1,
        ge=1,
        description="First code issued by a fresh counter"
    )
    ATOMIC_REGISTRATION: bool = Field(
        default=True,
        description=(
            "Allocate the code and store the entry in one transaction. "
            "When False, allocation commits first and a failed registration leaves a gap."
        )
    )

    # URL Validation
    VERIFY_DOMAIN: bool = Field(
        default=True,
        description="Resolve the URL's domain via DNS before shortening"
    )
    MAX_URL_LENGTH: int = Field(
        default=2048,
        description="Maximum accepted URL length"
    )


settings = Settings()

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the content
network service. Settings are loaded from environment variables with
sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_DB_PASSWORD = "fateh_network_password"

# config/ lives next to the src package
_CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"


class DatabaseSettings(BaseSettings):
    """Database configuration for the content network.

    One database holds the global catalog, version history, node registry,
    node mirrors, distribution jobs, translation requests and subscriptions.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        url_override: Full connection URL, takes precedence over components.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "fateh"
    password: SecretStr = SecretStr(_DEFAULT_DB_PASSWORD)
    host: str = "localhost"
    port: int = 5432
    database: str = "fateh_network"
    url_override: str | None = Field(
        default=None,
        validation_alias="DATABASE_URL",
    )
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        if self.url_override:
            return self.url_override
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"

    @property
    def sync_url(self) -> str:
        """Build the sync database URL for migrations."""
        pwd = self.password.get_secret_value()
        return f"postgresql://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured URL points at SQLite."""
        return self.url.startswith("sqlite")


class DistributionSettings(BaseSettings):
    """Fan-out configuration for content distribution.

    Attributes:
        max_concurrency: Maximum node mirrors written at the same time.
            A value of 1 makes the fan-out sequential.
        node_timeout_seconds: Time budget for a single node operation.
        default_language: Language assigned to freshly created mirrors.
    """

    model_config = SettingsConfigDict(
        env_prefix="DISTRIBUTION_",
        extra="ignore",
    )

    max_concurrency: int = Field(default=4, ge=1)
    node_timeout_seconds: float = Field(default=30.0, gt=0)
    default_language: str = "ar"


class LocalizationSettings(BaseSettings):
    """Localization and translation workflow configuration.

    Attributes:
        review_alert_hours: Hours a translation may sit in review before
            it is reported as overdue.
        content_types_path: YAML file with payload rules per content type.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOCALIZATION_",
        extra="ignore",
    )

    review_alert_hours: int = Field(default=72, ge=1)
    content_types_path: Path = _CONFIG_DIR / "content_types.yaml"


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
        reload: Whether to enable auto-reload.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 2
    reload: bool = False


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        service_name: Service name attached to every log record.
        quiet_loggers: Library loggers capped at WARNING.
        db: Database settings.
        distribution: Fan-out settings.
        localization: Localization workflow settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"
    service_name: str = "fateh-content-network"
    quiet_loggers: list[str] = Field(
        default_factory=lambda: ["uvicorn.access", "sqlalchemy.engine", "aiosqlite", "asyncio"]
    )

    # Subsettings - loaded with their own env prefixes
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    distribution: DistributionSettings = Field(default_factory=DistributionSettings)
    localization: LocalizationSettings = Field(default_factory=LocalizationSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            if (
                self.db.url_override is None
                and self.db.password.get_secret_value() == _DEFAULT_DB_PASSWORD
            ):
                raise ValueError(
                    "Database password must be changed from default in production. "
                    "Set DB_PASSWORD or DATABASE_URL environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()

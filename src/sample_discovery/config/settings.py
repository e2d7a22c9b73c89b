"""
Configuration management for the sample discovery resilience layer.

Each concern reads its own environment prefix; ``DiscoverySettings``
aggregates them and ``get_settings`` picks the environment-specific
defaults.
"""

import os
from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sample_discovery.observability.logging.config import LogFormat, LogLevel
from sample_discovery.resilience.fallback.cache import CacheSettings
from sample_discovery.resilience.health.config import HealthSettings
from sample_discovery.resilience.retry.config import RetrySettings


class Environment(str, Enum):
    """Deployment environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class ErrorLogSettings(BaseSettings):
    """Error log configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ERROR_LOG_", env_file=".env", extra="ignore"
    )

    capacity: int = Field(default=20, ge=1)
    storage_key: str = "discoveryErrorLogs"
    storage_path: str | None = None
    recent_window_ms: int = 3_600_000


class ObservabilitySettings(BaseSettings):
    """Observability configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OBSERVABILITY_", env_file=".env", extra="ignore"
    )

    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.JSON
    log_file: str | None = None
    metrics_enabled: bool = True


class DiscoverySettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="DISCOVERY_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    app_name: str = "Sample Discovery"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT

    # Primary dependency
    dependency_name: str = "primary-provider"
    provider_url: str = "https://www.googleapis.com/youtube/v3/search"
    user_agent: str = "sample-discovery/0.1.0"

    # Component settings
    retry: RetrySettings = Field(default_factory=RetrySettings)
    health: HealthSettings = Field(default_factory=HealthSettings)
    error_log: ErrorLogSettings = Field(default_factory=ErrorLogSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION


class DevelopmentSettings(DiscoverySettings):
    """Development environment settings."""

    environment: Environment = Environment.DEVELOPMENT

    observability: ObservabilitySettings = Field(
        default_factory=lambda: ObservabilitySettings(
            log_level=LogLevel.DEBUG, log_format=LogFormat.CONSOLE
        )
    )


class TestingSettings(DiscoverySettings):
    """Testing environment settings."""

    environment: Environment = Environment.TESTING

    # Fast retries for tests
    retry: RetrySettings = Field(
        default_factory=lambda: RetrySettings(base_delay_ms=1, max_delay_ms=10)
    )
    observability: ObservabilitySettings = Field(
        default_factory=lambda: ObservabilitySettings(log_level=LogLevel.WARNING)
    )


class ProductionSettings(DiscoverySettings):
    """Production environment settings."""

    environment: Environment = Environment.PRODUCTION


SETTINGS_BY_ENVIRONMENT: dict[Environment, type[DiscoverySettings]] = {
    Environment.DEVELOPMENT: DevelopmentSettings,
    Environment.TESTING: TestingSettings,
    Environment.PRODUCTION: ProductionSettings,
}


def create_settings(environment: str | None = None) -> DiscoverySettings:
    """Create settings for ``environment`` (defaults to ``$ENVIRONMENT``)."""
    name = environment or os.getenv("ENVIRONMENT", Environment.DEVELOPMENT.value)
    try:
        env = Environment(name.lower())
    except ValueError as e:
        raise ValueError(f"Unknown environment: {name}") from e
    return SETTINGS_BY_ENVIRONMENT[env]()


@lru_cache
def get_settings() -> DiscoverySettings:
    """Get cached settings for the current environment."""
    return create_settings()

"""Application configuration."""

from .settings import (
    DiscoverySettings,
    Environment,
    ErrorLogSettings,
    ObservabilitySettings,
    create_settings,
    get_settings,
)

__all__ = [
    "DiscoverySettings",
    "Environment",
    "ErrorLogSettings",
    "ObservabilitySettings",
    "create_settings",
    "get_settings",
]

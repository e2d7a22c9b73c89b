"""Dependency health tracking.

Tracks consecutive failures per dependency and fast-fails calls to a
degraded dependency until a single probe call is allowed through.
"""

from .config import HealthSettings, HealthTrackerConfig
from .tracker import DependencyHealth, ServiceHealthTracker

__all__ = [
    "DependencyHealth",
    "HealthSettings",
    "HealthTrackerConfig",
    "ServiceHealthTracker",
]

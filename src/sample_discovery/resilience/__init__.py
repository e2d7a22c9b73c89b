"""Resilience patterns for the external catalog provider.

This module provides error classification, a bounded diagnostic error log,
per-dependency health tracking, retry with exponential backoff and jitter,
and the fallback orchestrator that composes them.
"""

from .classification import ErrorClassifier, classify
from .error_log import ErrorLog
from .exceptions import (
    AllSourcesFailedException,
    DependencyDegradedException,
    ResilienceException,
)
from .fallback import FallbackOrchestrator, ResultCache
from .health import HealthTrackerConfig, ServiceHealthTracker
from .retry import (
    ExponentialBackoffStrategy,
    RetryExecutor,
    RetryOutcome,
    RetryPolicy,
    retry_decorator,
)

__all__ = [
    "ErrorClassifier",
    "classify",
    "ErrorLog",
    "ServiceHealthTracker",
    "HealthTrackerConfig",
    "RetryExecutor",
    "RetryOutcome",
    "RetryPolicy",
    "ExponentialBackoffStrategy",
    "retry_decorator",
    "FallbackOrchestrator",
    "ResultCache",
    "ResilienceException",
    "DependencyDegradedException",
    "AllSourcesFailedException",
]

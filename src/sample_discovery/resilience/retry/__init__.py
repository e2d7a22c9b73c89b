"""Retry mechanisms for provider calls.

This module provides an async retry executor with exponential backoff and
jitter, built on the tenacity library, plus a decorator form of it.
"""

from .config import RetryPolicy, RetrySettings
from .decorators import retry_decorator
from .executor import RetryExecutor, RetryOutcome
from .strategies import ExponentialBackoffStrategy, RetryStrategy, wait_strategy

__all__ = [
    "retry_decorator",
    "RetryPolicy",
    "RetrySettings",
    "RetryStrategy",
    "ExponentialBackoffStrategy",
    "RetryExecutor",
    "RetryOutcome",
    "wait_strategy",
]

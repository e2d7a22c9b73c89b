"""Fallback orchestration for graceful degradation.

The primary provider is tried through the retry executor; when it is
exhausted or known to be degraded, results come from the cache and finally
from the synthetic generator.
"""

from .cache import CacheSettings, ResultCache, ResultCacheProtocol
from .orchestrator import DEFAULT_DEPENDENCY, FallbackOrchestrator

__all__ = [
    "CacheSettings",
    "DEFAULT_DEPENDENCY",
    "FallbackOrchestrator",
    "ResultCache",
    "ResultCacheProtocol",
]

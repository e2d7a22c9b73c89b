"""Result cache used as the secondary tier of the fallback chain."""

from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

from sample_discovery.domain.models import DiscoveryRequest

from ..clock import Clock, now_ms

logger = structlog.get_logger()

T = TypeVar("T")


class CacheSettings(BaseSettings):
    """Result cache configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_", env_file=".env", extra="ignore"
    )

    enabled: bool = True
    ttl_ms: int = 300_000  # 5 minutes
    max_size: int = 100


class ResultCacheProtocol(Protocol[T]):
    """Cache interface consumed by the orchestrator."""

    def get(self, request: DiscoveryRequest) -> T | None:
        ...

    def put(self, request: DiscoveryRequest, value: T) -> None:
        ...


@dataclass
class CacheEntry(Generic[T]):
    value: T
    stored_at: int


class ResultCache(Generic[T]):
    """In-memory TTL cache keyed by normalized request."""

    def __init__(
        self,
        ttl_ms: int = 300_000,
        max_size: int = 100,
        clock: Clock = now_ms,
    ):
        """Initialize result cache.

        Args:
            ttl_ms: Entry lifetime in milliseconds
            max_size: Maximum number of entries before eviction
            clock: Epoch-millisecond clock
        """
        self.ttl_ms = ttl_ms
        self.max_size = max_size
        self.clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, request: DiscoveryRequest) -> T | None:
        """Return the cached value for ``request`` if present and fresh."""
        key = request.cache_key()
        entry = self._entries.get(key)

        if entry is None:
            self.misses += 1
            return None

        age = self.clock() - entry.stored_at
        if age >= self.ttl_ms:
            del self._entries[key]
            self.misses += 1
            logger.debug("Expired cache entry dropped", cache_age_ms=age)
            return None

        self.hits += 1
        return entry.value

    def put(self, request: DiscoveryRequest, value: T) -> None:
        """Cache a successful result."""
        key = request.cache_key()

        if key not in self._entries and len(self._entries) >= self.max_size:
            self._cleanup()

        self._entries[key] = CacheEntry(value=value, stored_at=self.clock())

    def invalidate(self) -> None:
        """Drop every entry."""
        self._entries.clear()
        logger.info("Result cache invalidated")

    def get_stats(self) -> dict[str, Any]:
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def _cleanup(self) -> None:
        """Remove the oldest quarter of entries (at least one)."""
        by_age = sorted(self._entries.items(), key=lambda item: item[1].stored_at)
        to_remove = max(1, len(by_age) // 4)
        for key, _ in by_age[:to_remove]:
            del self._entries[key]

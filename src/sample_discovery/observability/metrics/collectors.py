"""Metrics collectors for the discovery fallback chain."""

from collections.abc import Sized
from typing import Any

import structlog
from prometheus_client import Counter, Histogram
from prometheus_client.core import CollectorRegistry

from sample_discovery.domain.models import DataSource

logger = structlog.get_logger()

DURATION_BUCKETS = [0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0]


def result_count(value: Any) -> int:
    """Number of items in a fetch result value."""
    if value is None:
        return 0
    if isinstance(value, Sized) and not isinstance(value, str):
        return len(value)
    return 1


class DiscoveryMetrics:
    """Per-request metrics for ``fetch_with_fallback``.

    Each instance owns its registry, so several orchestrators (or tests) can
    collect side by side without clashing on metric names.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        self.requests_total = Counter(
            "discovery_requests_total",
            "Discovery requests served, by data source",
            ["source"],
            registry=self.registry,
        )
        self.results_total = Counter(
            "discovery_results_total",
            "Items returned to callers, by data source",
            ["source"],
            registry=self.registry,
        )
        self.request_duration_seconds = Histogram(
            "discovery_request_duration_seconds",
            "Discovery request duration in seconds",
            ["source"],
            buckets=DURATION_BUCKETS,
            registry=self.registry,
        )
        self.failures_total = Counter(
            "discovery_failures_total",
            "Discovery requests that raised instead of returning",
            ["reason"],
            registry=self.registry,
        )

    def record_request(
        self,
        source: DataSource,
        duration_seconds: float,
        value: Any = None,
        request_id: str | None = None,
    ) -> None:
        """Record a request that returned a result."""
        count = result_count(value)
        self.requests_total.labels(source=source.value).inc()
        self.results_total.labels(source=source.value).inc(count)
        self.request_duration_seconds.labels(source=source.value).observe(
            duration_seconds
        )

        logger.debug(
            "Discovery request recorded",
            source=source.value,
            success=source != DataSource.NONE,
            result_count=count,
            duration=duration_seconds,
            request_id=request_id,
        )

    def record_failure(
        self,
        reason: str,
        duration_seconds: float,
        request_id: str | None = None,
    ) -> None:
        """Record a request that raised."""
        self.failures_total.labels(reason=reason).inc()
        self.request_duration_seconds.labels(source="failed").observe(
            duration_seconds
        )

        logger.debug(
            "Discovery request failure recorded",
            reason=reason,
            duration=duration_seconds,
            request_id=request_id,
        )

    def get_value(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Current value of a sample, 0.0 if it was never recorded."""
        value = self.registry.get_sample_value(name, labels or {})
        return value if value is not None else 0.0

    def get_stats(self) -> dict[str, Any]:
        """Request counts per source plus failures."""
        stats: dict[str, Any] = {
            source.value: self.get_value(
                "discovery_requests_total", {"source": source.value}
            )
            for source in DataSource
        }
        stats["failed"] = sum(
            sample.value
            for metric in self.failures_total.collect()
            for sample in metric.samples
            if sample.name == "discovery_failures_total"
        )
        return stats

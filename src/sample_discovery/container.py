"""Explicit wiring of the resilience components.

Every container owns its own classifier, error log, health tracker, cache
and executor, so independent instances can coexist and tests can swap any
piece for a fake.
"""

import asyncio
from collections.abc import Callable
from typing import Any

import structlog

from sample_discovery.config import DiscoverySettings, get_settings
from sample_discovery.domain.models import DiscoveryRequest, FetchResult
from sample_discovery.infrastructure.environment import HostEnvironment
from sample_discovery.infrastructure.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from sample_discovery.observability.logging import setup_logging
from sample_discovery.observability.metrics import DiscoveryMetrics
from sample_discovery.resilience.classification import ErrorClassifier
from sample_discovery.resilience.error_log import ErrorLog, ErrorReporter
from sample_discovery.resilience.fallback import FallbackOrchestrator, ResultCache
from sample_discovery.resilience.fallback.orchestrator import (
    Provider,
    SyntheticGenerator,
)
from sample_discovery.resilience.health import ServiceHealthTracker
from sample_discovery.resilience.retry import RetryExecutor

logger = structlog.get_logger()


class DiscoveryContainer:
    """Builds and owns one fallback orchestrator and its collaborators."""

    def __init__(
        self,
        provider: Provider[Any],
        generator: SyntheticGenerator[Any],
        settings: DiscoverySettings | None = None,
        store: KeyValueStore | None = None,
        environment: HostEnvironment | None = None,
        reporter: ErrorReporter | None = None,
        sleep: Callable[[float], Any] = asyncio.sleep,
        configure_logging: bool = False,
    ):
        """Initialize the container.

        Args:
            provider: Primary catalog provider
            generator: Synthetic fallback generator
            settings: Settings (defaults to the current environment's)
            store: Error log store (defaults to a file store when
                ``error_log.storage_path`` is set, in-memory otherwise)
            environment: Host signals (defaults to always online)
            reporter: Optional external error reporter
            sleep: Sleep used between retries
            configure_logging: Apply the observability settings to structlog
        """
        self.settings = settings or get_settings()

        if configure_logging:
            observability = self.settings.observability
            setup_logging(
                level=observability.log_level,
                format_type=observability.log_format,
                log_file=observability.log_file,
                service=self.settings.app_name,
                environment=self.settings.environment.value,
            )

        self.environment = environment or HostEnvironment(
            url=self.settings.provider_url,
            user_agent=self.settings.user_agent,
        )
        self.store = store if store is not None else self._default_store()

        self.classifier = ErrorClassifier(self.environment.is_online)

        log_settings = self.settings.error_log
        self.error_log = ErrorLog(
            self.store,
            self.environment,
            capacity=log_settings.capacity,
            storage_key=log_settings.storage_key,
            reporter=reporter,
            recent_window_ms=log_settings.recent_window_ms,
        )
        self.error_log.load()

        self.health_tracker = ServiceHealthTracker(self.settings.health.get_config())

        self.cache: ResultCache[Any] | None = None
        if self.settings.cache.enabled:
            self.cache = ResultCache(
                ttl_ms=self.settings.cache.ttl_ms,
                max_size=self.settings.cache.max_size,
            )

        self.metrics: DiscoveryMetrics | None = None
        if self.settings.observability.metrics_enabled:
            self.metrics = DiscoveryMetrics()

        policy = self.settings.retry.get_policy()
        self.executor = RetryExecutor(
            self.classifier, self.error_log, default_policy=policy, sleep=sleep
        )

        self.orchestrator: FallbackOrchestrator[Any] = FallbackOrchestrator(
            provider=provider,
            generator=generator,
            executor=self.executor,
            health_tracker=self.health_tracker,
            classifier=self.classifier,
            error_log=self.error_log,
            cache=self.cache,
            policy=policy,
            dependency_name=self.settings.dependency_name,
            metrics=self.metrics,
        )

        logger.info(
            "Discovery container initialized",
            environment=self.settings.environment.value,
            dependency=self.settings.dependency_name,
            cache_enabled=self.cache is not None,
            metrics_enabled=self.metrics is not None,
        )

    def _default_store(self) -> KeyValueStore:
        path = self.settings.error_log.storage_path
        if path:
            return JsonFileKeyValueStore(path)
        return InMemoryKeyValueStore()

    async def fetch(self, request: DiscoveryRequest | None = None) -> FetchResult[Any]:
        """Shortcut for ``orchestrator.fetch_with_fallback``."""
        return await self.orchestrator.fetch_with_fallback(request)

    def get_health_report(self) -> dict[str, Any]:
        return self.orchestrator.get_health_report()

    def get_error_stats(self) -> dict[str, Any]:
        return self.orchestrator.get_error_stats()

    def get_metrics(self) -> dict[str, Any]:
        return self.orchestrator.get_metrics()

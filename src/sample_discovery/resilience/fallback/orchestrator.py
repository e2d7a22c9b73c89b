"""Fallback orchestration: primary provider, then cache, then synthetic data."""

import inspect
import time
from collections.abc import Awaitable, Callable, Sized
from typing import Any, Generic, TypeVar

import structlog

from sample_discovery.domain.models import (
    DataSource,
    DiscoveryRequest,
    ErrorClassification,
    FetchResult,
    HealthState,
)
from sample_discovery.observability.logging.correlation import CorrelationContext
from sample_discovery.observability.metrics import DiscoveryMetrics

from ..classification import DEGRADED_SERVICE_CLASSIFICATION, ErrorClassifier
from ..error_log import ErrorLog
from ..exceptions import AllSourcesFailedException
from ..health import ServiceHealthTracker
from ..retry import RetryExecutor, RetryPolicy
from .cache import ResultCacheProtocol

logger = structlog.get_logger()

T = TypeVar("T")

Provider = Callable[[DiscoveryRequest], Awaitable[T]]
SyntheticGenerator = Callable[[DiscoveryRequest], T | Awaitable[T]]

DEFAULT_DEPENDENCY = "primary-provider"
EMPTY_RESULT_MESSAGE = "No live samples matched. Showing demo samples instead."


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, Sized) and not isinstance(value, str) and len(value) == 0


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class FallbackOrchestrator(Generic[T]):
    """Top-level "get me the data" entry point.

    Consults the health tracker, runs the provider through the retry
    executor and, once retries are exhausted or the provider comes back
    empty, falls back to the result cache and finally to the synthetic
    generator. The generator is expected never to fail, so
    ``fetch_with_fallback`` only raises when both the cache lookup and the
    generator raise, or when the call itself is cancelled.
    """

    def __init__(
        self,
        provider: Provider[T],
        generator: SyntheticGenerator[T],
        executor: RetryExecutor,
        health_tracker: ServiceHealthTracker,
        classifier: ErrorClassifier,
        error_log: ErrorLog,
        cache: ResultCacheProtocol[T] | None = None,
        policy: RetryPolicy | None = None,
        dependency_name: str = DEFAULT_DEPENDENCY,
        metrics: DiscoveryMetrics | None = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        """Initialize fallback orchestrator.

        Args:
            provider: Primary data source, called with the request
            generator: Synthetic data producer used as the last tier
            executor: Retry executor wrapping the provider
            health_tracker: Shared health state for ``dependency_name``
            classifier: Classifies failures; also supplies the online signal
            error_log: Diagnostic log for fallback-tier failures
            cache: Secondary tier; primary results are stored here
            policy: Retry policy for the provider
            dependency_name: Name the provider is tracked under
            metrics: Per-request metrics collector
            timer: Monotonic clock in seconds used for request durations
        """
        self.provider = provider
        self.generator = generator
        self.executor = executor
        self.health_tracker = health_tracker
        self.classifier = classifier
        self.error_log = error_log
        self.cache = cache
        self.policy = policy
        self.dependency_name = dependency_name
        self.metrics = metrics
        self.timer = timer
        self._last_classification: ErrorClassification | None = None

    async def fetch_with_fallback(
        self, request: DiscoveryRequest | None = None
    ) -> FetchResult[T]:
        """Fetch data for ``request``, degrading gracefully.

        Returns:
            Result tagged with its source; synthetic results are marked as
            placeholders

        Raises:
            AllSourcesFailedException: The cache lookup and the generator
                both raised
        """
        request = request or DiscoveryRequest()
        started = self.timer()

        with CorrelationContext() as correlation:
            request_id = correlation.correlation_id

            try:
                result = await self._fetch(request, request_id)
            except BaseException as e:
                if self.metrics is not None:
                    self.metrics.record_failure(
                        type(e).__name__, self.timer() - started, request_id
                    )
                raise

            if self.metrics is not None:
                self.metrics.record_request(
                    result.source, self.timer() - started, result.value, request_id
                )
            return result

    async def _fetch(self, request: DiscoveryRequest, request_id: str) -> FetchResult[T]:
        if not self.classifier.is_online():
            classification = self.classifier.classify(ConnectionError("Host is offline"))
            logger.info(
                "Host offline, skipping primary provider",
                dependency=self.dependency_name,
            )
            return await self._serve_fallback(
                request, request_id, classification, "offline"
            )

        if not self.health_tracker.try_acquire(self.dependency_name):
            logger.info(
                "Dependency degraded, skipping primary provider",
                dependency=self.dependency_name,
            )
            return await self._serve_fallback(
                request,
                request_id,
                self._last_classification or DEGRADED_SERVICE_CLASSIFICATION,
                "dependency_degraded",
            )

        trial_call = (
            self.health_tracker.get_health(self.dependency_name).state
            == HealthState.PROBING
        )

        async def call_primary() -> FetchResult[T]:
            value = await self.provider(request)
            self.health_tracker.record_success(self.dependency_name)
            self._store(request, value)
            return FetchResult(
                value=value, source=DataSource.PRIMARY, request_id=request_id
            )

        async def secondary_fallback(error: BaseException) -> FetchResult[T]:
            return await self._handle_primary_failure(request, request_id, error)

        try:
            result = await self.executor.with_retry(
                call_primary,
                self.policy,
                secondary_fallback,
                context=self.dependency_name,
            )
        except BaseException:
            # A trial call that ends without an outcome must not hold the slot.
            if trial_call:
                self.health_tracker.release_trial(self.dependency_name)
            raise

        if result.source == DataSource.PRIMARY and _is_empty(result.value):
            logger.info(
                "Primary returned no results, trying fallback tiers",
                dependency=self.dependency_name,
            )
            return await self._serve_fallback(request, request_id, None, "empty_result")
        return result

    async def _handle_primary_failure(
        self, request: DiscoveryRequest, request_id: str, error: BaseException
    ) -> FetchResult[T]:
        classification = self.classifier.classify(error)
        self._last_classification = classification

        if not classification.fallback_eligible:
            # The provider answered; one missing resource is not an outage.
            self.health_tracker.record_success(self.dependency_name)
            logger.info(
                "Primary failure not eligible for fallback",
                dependency=self.dependency_name,
                error_kind=classification.kind.value,
            )
            return FetchResult(
                source=DataSource.NONE,
                classification=classification,
                user_message=classification.user_message,
                request_id=request_id,
            )

        self.health_tracker.record_failure(self.dependency_name, error)
        return await self._serve_fallback(
            request, request_id, classification, type(error).__name__
        )

    async def _serve_fallback(
        self,
        request: DiscoveryRequest,
        request_id: str,
        classification: ErrorClassification | None,
        reason: str,
    ) -> FetchResult[T]:
        user_message = (
            classification.user_message if classification else EMPTY_RESULT_MESSAGE
        )
        cache_error: Exception | None = None

        if self.cache is not None and not request.force_refresh:
            try:
                cached = await _resolve(self.cache.get(request))
            except Exception as e:
                cache_error = e
                self.error_log.log_error(
                    "cache-lookup", e, {"request_id": request_id}
                )
            else:
                if not _is_empty(cached):
                    logger.info(
                        "Serving cached results",
                        dependency=self.dependency_name,
                        reason=reason,
                    )
                    return FetchResult(
                        value=cached,
                        source=DataSource.CACHE,
                        classification=classification,
                        user_message=user_message,
                        request_id=request_id,
                    )

        try:
            generated = await _resolve(self.generator(request))
        except Exception as e:
            self.error_log.log_error(
                "synthetic-generator", e, {"request_id": request_id}
            )
            if cache_error is not None:
                logger.error(
                    "All discovery sources failed",
                    dependency=self.dependency_name,
                    last_error=str(e),
                )
                raise AllSourcesFailedException(
                    self.dependency_name, classification, e, request_id
                ) from e
            return FetchResult(
                source=DataSource.NONE,
                classification=classification,
                user_message=user_message,
                request_id=request_id,
            )

        logger.info(
            "Serving synthetic placeholder results",
            dependency=self.dependency_name,
            reason=reason,
        )
        return FetchResult(
            value=generated,
            source=DataSource.SYNTHETIC,
            is_placeholder=True,
            classification=classification,
            user_message=user_message,
            request_id=request_id,
        )

    def _store(self, request: DiscoveryRequest, value: T) -> None:
        if self.cache is None or _is_empty(value):
            return
        try:
            self.cache.put(request, value)
        except Exception as e:
            logger.warning("Failed to cache results", error=str(e))

    def get_health_report(self) -> dict[str, Any]:
        return self.health_tracker.get_health_report()

    def get_error_stats(self) -> dict[str, Any]:
        return self.error_log.get_error_stats().to_dict()

    def get_metrics(self) -> dict[str, Any]:
        """Request counts per source, empty without a metrics collector."""
        if self.metrics is None:
            return {}
        return self.metrics.get_stats()

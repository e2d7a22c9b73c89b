"""Retry executor: exponential backoff with jitter and an optional fallback."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, cast

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    stop_any,
)

from sample_discovery.domain.models import ErrorClassification
from sample_discovery.observability.logging.correlation import get_correlation_id

from ..classification import ErrorClassifier
from ..error_log import ErrorLog
from .config import RetryPolicy
from .strategies import ExponentialBackoffStrategy, RetryStrategy, wait_strategy

logger = structlog.get_logger()

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
Fallback = Callable[[BaseException], Awaitable[T] | T]
Sleep = Callable[[float], Awaitable[None]]


@dataclass
class RetryOutcome(Generic[T]):
    """Explicit result of a retried operation."""

    ok: bool
    attempts: int
    value: T | None = None
    error: BaseException | None = None
    classification: ErrorClassification | None = None


class RetryExecutor:
    """Runs async operations with retries, logging every failed attempt."""

    def __init__(
        self,
        classifier: ErrorClassifier,
        error_log: ErrorLog,
        default_policy: RetryPolicy | None = None,
        strategy: RetryStrategy | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize retry executor.

        Args:
            classifier: Classifies each failed attempt
            error_log: Receives one record per failed attempt
            default_policy: Policy used when a call site passes none
            strategy: Delay strategy (defaults to ExponentialBackoffStrategy)
            sleep: Awaitable sleep taking seconds; injectable for tests
        """
        self.classifier = classifier
        self.error_log = error_log
        self.default_policy = default_policy or RetryPolicy()
        self.strategy = strategy or ExponentialBackoffStrategy()
        self.sleep = sleep

    def calculate_delay(self, attempt: int, policy: RetryPolicy | None = None) -> float:
        """Delay in milliseconds to wait after the zero-based ``attempt``."""
        return self.strategy.calculate_delay(attempt, policy or self.default_policy)

    async def with_retry(
        self,
        operation: Operation[T],
        policy: RetryPolicy | None = None,
        fallback: Fallback[T] | None = None,
        *,
        context: str = "unknown",
    ) -> T:
        """Run ``operation`` with retries.

        Args:
            operation: Zero-argument coroutine factory
            policy: Retry policy (defaults to the executor's default policy)
            fallback: Called once with the final error when retries run out
            context: Label used in logs and error records

        Returns:
            The operation's result, or the fallback's result

        Raises:
            The operation's final error, unwrapped, when no fallback is given.
            A failing fallback propagates its own error unmodified.
        """
        outcome = await self.try_with_retry(operation, policy, context=context)

        if outcome.ok:
            return outcome.value  # type: ignore[return-value]

        # A failed outcome always carries the final error.
        error = cast(BaseException, outcome.error)

        if fallback is None:
            raise error

        try:
            result = fallback(error)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as fallback_error:
            self.error_log.log_error(
                "fallback-execution",
                fallback_error,
                {"original_error": str(error), "operation_context": context},
            )
            raise

    async def try_with_retry(
        self,
        operation: Operation[T],
        policy: RetryPolicy | None = None,
        *,
        context: str = "unknown",
    ) -> RetryOutcome[T]:
        """Run ``operation`` with retries and report the outcome as data."""
        policy = policy or self.default_policy
        attempts = 0
        last_classification: ErrorClassification | None = None

        def record_failure(retry_state: RetryCallState) -> None:
            nonlocal last_classification
            if retry_state.outcome is None:
                return
            error = retry_state.outcome.exception()
            last_classification = self.classifier.classify(error)
            metadata: dict[str, object] = {"max_attempts": policy.max_attempts}
            request_id = get_correlation_id()
            if request_id:
                metadata["request_id"] = request_id
            self.error_log.log_error(
                context,
                error,
                metadata,
                error_kind=last_classification.kind,
                retry_attempt=retry_state.attempt_number - 1,
            )

        def stop_if_non_retryable(retry_state: RetryCallState) -> bool:
            return (
                policy.stop_on_non_retryable
                and last_classification is not None
                and not last_classification.retryable
            )

        def log_before_sleep(retry_state: RetryCallState) -> None:
            next_action = retry_state.next_action
            logger.warning(
                "Operation failed, retrying",
                context=context,
                attempt=retry_state.attempt_number,
                max_attempts=policy.max_attempts,
                delay=next_action.sleep if next_action else None,
                error_kind=last_classification.kind.value
                if last_classification
                else None,
            )

        retrying = AsyncRetrying(
            stop=stop_any(stop_after_attempt(policy.max_attempts), stop_if_non_retryable),
            wait=wait_strategy(self.strategy, policy),
            retry=retry_if_exception_type(Exception),
            after=record_failure,
            before_sleep=log_before_sleep,
            sleep=self.sleep,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempts += 1
                    value = await operation()
        except Exception as error:
            logger.error(
                "Operation failed after all retries",
                context=context,
                attempts=attempts,
                error_type=type(error).__name__,
                error_kind=last_classification.kind.value
                if last_classification
                else None,
            )
            return RetryOutcome(
                ok=False,
                attempts=attempts,
                error=error,
                classification=last_classification,
            )

        if attempts > 1:
            logger.info(
                "Operation succeeded after retries",
                context=context,
                attempts=attempts,
                last_error_kind=last_classification.kind.value
                if last_classification
                else None,
            )

        return RetryOutcome(
            ok=True,
            attempts=attempts,
            value=value,
            classification=last_classification,
        )

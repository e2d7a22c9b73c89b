"""Bounded, best-effort diagnostic error log."""

import json
import traceback
import uuid
from collections import Counter, deque
from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError

from sample_discovery.domain.models import (
    ErrorKind,
    ErrorMetadata,
    ErrorRecord,
    ErrorStats,
)
from sample_discovery.infrastructure.environment import HostEnvironment
from sample_discovery.infrastructure.storage import KeyValueStore

from ..classification import classify, extract_message
from ..clock import Clock, now_ms

logger = structlog.get_logger()

ErrorReporter = Callable[[ErrorRecord], None]

DEFAULT_CAPACITY = 20
DEFAULT_STORAGE_KEY = "discoveryErrorLogs"
ONE_HOUR_MS = 60 * 60 * 1000


class ErrorLog:
    """Capacity-limited error log persisted to a key-value store.

    The log is diagnostic only: ``log_error`` never raises, whatever happens
    to the store or the external reporter.
    """

    def __init__(
        self,
        store: KeyValueStore,
        environment: HostEnvironment,
        capacity: int = DEFAULT_CAPACITY,
        storage_key: str = DEFAULT_STORAGE_KEY,
        reporter: ErrorReporter | None = None,
        clock: Clock = now_ms,
        recent_window_ms: int = ONE_HOUR_MS,
    ):
        """Initialize error log.

        Args:
            store: Key-value store the full record list is persisted to
            environment: Host signals captured in each record's metadata
            capacity: Maximum number of records kept; oldest evicted first
            storage_key: Key the JSON array is stored under
            reporter: Optional external reporting hook
            clock: Epoch-millisecond clock
            recent_window_ms: Window used for ``recent_errors``
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")

        self.store = store
        self.environment = environment
        self.capacity = capacity
        self.storage_key = storage_key
        self.reporter = reporter
        self.clock = clock
        self.recent_window_ms = recent_window_ms
        self._records: deque[ErrorRecord] = deque(maxlen=capacity)

    @property
    def records(self) -> tuple[ErrorRecord, ...]:
        """Records currently held, oldest first."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def set_reporter(self, reporter: ErrorReporter | None) -> None:
        """Install or remove the external reporting hook."""
        self.reporter = reporter

    def load(self) -> int:
        """Restore persisted records, keeping the newest ``capacity``.

        Returns:
            Number of records restored
        """
        try:
            raw = self.store.get(self.storage_key)
        except Exception as e:
            logger.warning("Failed to read stored error logs", error=str(e))
            return 0

        if not raw:
            return 0

        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Stored error logs are corrupt, ignoring", error=str(e))
            return 0

        if not isinstance(entries, list):
            logger.warning("Stored error logs are not a list, ignoring")
            return 0

        restored = []
        for entry in entries:
            try:
                restored.append(ErrorRecord.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping malformed stored error log entry")

        self._records.clear()
        self._records.extend(restored[-self.capacity :])
        return len(self._records)

    def log_error(
        self,
        context: str,
        error: Any,
        metadata: dict[str, Any] | None = None,
        *,
        error_kind: ErrorKind | None = None,
        retry_attempt: int = 0,
    ) -> ErrorRecord:
        """Record a failure.

        Args:
            context: Where the failure happened (dependency or operation name)
            error: Raw failure; exceptions contribute their traceback
            metadata: Extra key/values stored with the record
            error_kind: Precomputed classification kind, classified here if
                omitted
            retry_attempt: Zero-based attempt index within one logical call

        Returns:
            The created record
        """
        timestamp = self.clock()
        is_online = self.environment.is_online()

        record = ErrorRecord(
            id=f"error-{timestamp}-{uuid.uuid4().hex[:9]}",
            timestamp=timestamp,
            context=context,
            error_kind=error_kind or classify(error, is_online=is_online).kind,
            message=self._describe(error),
            stack_trace=self._stack_trace(error),
            metadata=ErrorMetadata(
                is_online=is_online,
                url=self.environment.url,
                user_agent=self.environment.user_agent,
                extra=dict(metadata or {}),
            ),
            retry_attempt=retry_attempt,
        )

        if len(self._records) >= self.capacity:
            evicted = self._records.popleft()
            logger.debug("Evicted oldest error log entry", error_id=evicted.id)
        self._records.append(record)

        self._persist()
        self._report(record)

        logger.warning(
            "Discovery error logged",
            context=context,
            error_id=record.id,
            error_kind=record.error_kind.value,
            retry_attempt=retry_attempt,
            error_message=record.message,
        )
        return record

    def get_error_stats(self) -> ErrorStats:
        """Summarize the log. The recent window is recomputed on every call."""
        now = self.clock()
        recent = [r for r in self._records if now - r.timestamp < self.recent_window_ms]

        return ErrorStats(
            total_errors=len(self._records),
            recent_errors=len(recent),
            errors_by_context=dict(Counter(r.context for r in recent)),
            retry_attempts=sum(1 for r in self._records if r.retry_attempt > 0),
        )

    def clear_error_logs(self) -> None:
        """Drop all records, in memory and in the store."""
        self._records.clear()

        try:
            self.store.delete(self.storage_key)
        except Exception as e:
            logger.warning("Failed to clear stored error logs", error=str(e))

    def _persist(self) -> None:
        try:
            payload = json.dumps([r.to_storage() for r in self._records])
            self.store.set(self.storage_key, payload)
        except Exception as e:
            logger.warning("Failed to store error log", error=str(e))

    def _report(self, record: ErrorRecord) -> None:
        if self.reporter is None:
            return

        try:
            self.reporter(record)
        except Exception as e:
            logger.warning(
                "Failed to report error to monitoring",
                error_id=record.id,
                error=str(e),
            )

    @staticmethod
    def _describe(error: Any) -> str:
        try:
            message = extract_message(error)
        except Exception:
            message = ""
        if message:
            return message
        if isinstance(error, BaseException):
            return type(error).__name__
        return "Unknown error"

    @staticmethod
    def _stack_trace(error: Any) -> str | None:
        if not isinstance(error, BaseException) or error.__traceback__ is None:
            return None
        return "".join(traceback.format_exception(error))

"""Domain models for the sample discovery resilience layer.

Everything that crosses a component boundary lives here: the error
taxonomy, the classification produced for each failure, the records kept in
the diagnostic log, per-dependency health snapshots, and the request/result
pair exchanged with the fallback orchestrator.
"""

import json
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Standardized error codes."""

    EXTERNAL_SERVICE_ERROR = "external_service_error"
    DEPENDENCY_DEGRADED = "dependency_degraded"
    FALLBACK_FAILED = "fallback_failed"
    INTERNAL_ERROR = "internal_error"


class ErrorKind(str, Enum):
    """Closed taxonomy of provider failures."""

    NETWORK_OFFLINE = "network_offline"
    NETWORK_TIMEOUT = "network_timeout"
    NETWORK_GENERIC = "network_generic"
    CORS_BLOCKED = "cors_blocked"
    QUOTA_EXCEEDED = "quota_exceeded"
    RATE_LIMITED = "rate_limited"
    RESOURCE_UNAVAILABLE = "resource_unavailable"
    UNKNOWN_UPSTREAM = "unknown_upstream"


class ErrorSeverity(str, Enum):
    """Severity attached to a classification."""

    WARNING = "warning"
    ERROR = "error"


class ErrorClassification(BaseModel):
    """Actionable description of a single failure."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    severity: ErrorSeverity
    retryable: bool
    fallback_eligible: bool
    retry_after_ms: int | None = None
    user_message: str


class ErrorMetadata(BaseModel):
    """Host context captured alongside each logged failure."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_online: bool = Field(alias="isOnline")
    url: str
    user_agent: str = Field(alias="userAgent")
    extra: dict[str, Any] = Field(default_factory=dict)


class ErrorRecord(BaseModel):
    """One entry of the bounded error log. Never mutated after creation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: int = Field(description="Epoch milliseconds")
    context: str
    error_kind: ErrorKind = Field(alias="errorKind")
    message: str
    stack_trace: str | None = Field(default=None, alias="stackTrace")
    metadata: ErrorMetadata
    retry_attempt: int = Field(default=0, ge=0, alias="retryAttempt")

    def to_storage(self) -> dict[str, Any]:
        """Serialize using the persisted (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)


class ErrorStats(BaseModel):
    """Summary returned by the error log for diagnostics screens."""

    total_errors: int = 0
    recent_errors: int = 0
    errors_by_context: dict[str, int] = Field(default_factory=dict)
    retry_attempts: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Render with the external camelCase keys."""
        return {
            "totalErrors": self.total_errors,
            "recentErrors": self.recent_errors,
            "errorsByContext": dict(self.errors_by_context),
            "retryAttempts": self.retry_attempts,
        }


class HealthState(str, Enum):
    """Health states of a tracked dependency."""

    AVAILABLE = "available"
    DEGRADED = "degraded"
    PROBING = "probing"


class ServiceHealthState(BaseModel):
    """Snapshot of one dependency's health."""

    model_config = ConfigDict(frozen=True)

    dependency_name: str
    state: HealthState = HealthState.AVAILABLE
    consecutive_failures: int = 0
    last_success_at: int | None = None
    last_failure_at: int | None = None
    degraded_since: int | None = None

    @property
    def available(self) -> bool:
        """Only a recorded success makes a dependency available again."""
        return self.state == HealthState.AVAILABLE


class DataSource(str, Enum):
    """Where a fetch result came from."""

    PRIMARY = "primary"
    CACHE = "cache"
    SYNTHETIC = "synthetic"
    NONE = "none"


class DiscoveryRequest(BaseModel):
    """A catalog query handed to the orchestrator."""

    filters: dict[str, Any] = Field(default_factory=dict)
    max_results: int = Field(default=12, ge=1, le=100)
    force_refresh: bool = False

    def cache_key(self) -> str:
        """Stable key; list-valued filters are order-insensitive."""
        normalized = {
            key: sorted(value, key=str) if isinstance(value, list) else value
            for key, value in self.filters.items()
        }
        return json.dumps(
            {"filters": normalized, "max_results": self.max_results},
            sort_keys=True,
            default=str,
        )


class FetchResult(BaseModel, Generic[T]):
    """Outcome of a fetch; classified failures are data, not exceptions."""

    value: T | None = None
    source: DataSource
    is_placeholder: bool = False
    classification: ErrorClassification | None = None
    user_message: str | None = None
    request_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.source != DataSource.NONE

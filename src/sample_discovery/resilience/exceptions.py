"""Resilience-specific exceptions."""

from typing import Any

from sample_discovery.domain.exceptions import DiscoveryException
from sample_discovery.domain.models import ErrorClassification, ErrorCode


class ResilienceException(DiscoveryException):
    """Base exception for resilience patterns."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message, error_code, details, correlation_id)


class DependencyDegradedException(ResilienceException):
    """Primary dependency is degraded; the call was short-circuited."""

    def __init__(self, dependency_name: str, correlation_id: str | None = None):
        super().__init__(
            f"Dependency degraded, skipping primary call: {dependency_name}",
            ErrorCode.DEPENDENCY_DEGRADED,
            {"dependency_name": dependency_name},
            correlation_id,
        )
        self.dependency_name = dependency_name


class AllSourcesFailedException(ResilienceException):
    """Every tier of the fallback chain failed."""

    def __init__(
        self,
        dependency_name: str,
        classification: ErrorClassification | None = None,
        last_error: BaseException | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(
            f"All discovery sources failed for dependency: {dependency_name}",
            ErrorCode.FALLBACK_FAILED,
            {
                "dependency_name": dependency_name,
                "last_error": str(last_error) if last_error else None,
            },
            correlation_id,
        )
        self.dependency_name = dependency_name
        self.classification = classification
        self.last_error = last_error

    @property
    def user_message(self) -> str:
        if self.classification is not None:
            return self.classification.user_message
        return "Sample discovery is temporarily unavailable."

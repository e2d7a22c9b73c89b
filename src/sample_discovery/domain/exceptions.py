"""Exception hierarchy for the sample discovery application."""

from typing import Any

from .models import ErrorCode


class DiscoveryException(Exception):
    """Base exception for the sample discovery application."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: dict[str, Any] | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}
        self.correlation_id = correlation_id


class ProviderError(DiscoveryException):
    """Failure reported by the external catalog provider.

    ``status`` carries the HTTP status when the provider returned one, so the
    classifier can tell quota exhaustion apart from a missing resource.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        provider: str = "unknown",
        correlation_id: str | None = None,
    ):
        super().__init__(
            message,
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            {"provider": provider, "status": status},
            correlation_id,
        )
        self.status = status
        self.provider = provider

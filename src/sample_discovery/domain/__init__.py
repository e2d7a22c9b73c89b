"""Domain models and exceptions."""

from .exceptions import DiscoveryException, ProviderError
from .models import (
    DataSource,
    DiscoveryRequest,
    ErrorClassification,
    ErrorCode,
    ErrorKind,
    ErrorMetadata,
    ErrorRecord,
    ErrorSeverity,
    ErrorStats,
    FetchResult,
    HealthState,
    ServiceHealthState,
)

__all__ = [
    "DataSource",
    "DiscoveryException",
    "DiscoveryRequest",
    "ErrorClassification",
    "ErrorCode",
    "ErrorKind",
    "ErrorMetadata",
    "ErrorRecord",
    "ErrorSeverity",
    "ErrorStats",
    "FetchResult",
    "HealthState",
    "ProviderError",
    "ServiceHealthState",
]

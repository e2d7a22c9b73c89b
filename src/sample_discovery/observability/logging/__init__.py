"""Structured logging configuration and utilities."""

from .config import (
    LogFormat,
    LogLevel,
    ServiceContextProcessor,
    build_processors,
    setup_logging,
)
from .correlation import (
    CorrelationContext,
    CorrelationIDProcessor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from .formatters import ConsoleFormatter, JSONFormatter

__all__ = [
    "setup_logging",
    "build_processors",
    "LogLevel",
    "LogFormat",
    "ServiceContextProcessor",
    "JSONFormatter",
    "ConsoleFormatter",
    "CorrelationContext",
    "CorrelationIDProcessor",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]

"""Structured logging setup for the discovery resilience layer."""

import logging
import sys
from enum import Enum
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory

from .correlation import CorrelationIDProcessor
from .formatters import ConsoleFormatter, JSONFormatter


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Logging formats."""

    JSON = "json"
    CONSOLE = "console"


class ServiceContextProcessor:
    """Stamps every event with the service name and environment."""

    def __init__(self, service: str, environment: str | None = None):
        self.service = service
        self.environment = environment

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.setdefault("service", self.service)
        if self.environment:
            event_dict.setdefault("environment", self.environment)
        return event_dict


def build_processors(
    format_type: LogFormat,
    service: str | None = None,
    environment: str | None = None,
    enable_correlation: bool = True,
    enable_colors: bool = True,
) -> list[Any]:
    """Processor chain: stdlib enrichment, request context, then rendering."""
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if service:
        processors.append(ServiceContextProcessor(service, environment))

    # request_id of the fetch currently running, if any
    if enable_correlation:
        processors.append(CorrelationIDProcessor())

    if format_type == LogFormat.CONSOLE:
        processors.append(ConsoleFormatter(colors=enable_colors))
    else:
        processors.append(JSONFormatter())
    return processors


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    format_type: LogFormat = LogFormat.JSON,
    log_file: str | None = None,
    service: str | None = None,
    environment: str | None = None,
    enable_correlation: bool = True,
    enable_colors: bool = True,
) -> None:
    """Route structlog through the standard library at ``level``.

    Events go to ``log_file`` when given, stdout otherwise. Calling this
    again replaces the previous configuration.
    """
    handler: logging.Handler = (
        logging.FileHandler(log_file) if log_file else logging.StreamHandler(sys.stdout)
    )
    logging.basicConfig(
        level=getattr(logging, level.value),
        format="%(message)s",
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=build_processors(
            format_type,
            service=service,
            environment=environment,
            enable_correlation=enable_correlation,
            enable_colors=enable_colors and not log_file,
        ),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

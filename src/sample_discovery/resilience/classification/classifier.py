"""Error classification for provider failures.

Raw failures arrive in many shapes: exceptions raised by an HTTP client,
``ProviderError`` instances carrying a status code, plain mappings decoded
from an API error payload, or bare strings. ``classify`` normalizes them and
maps them onto the closed ``ErrorKind`` taxonomy. Rules are evaluated in a
fixed order and the first match wins, because provider messages routinely
contain several of the keywords at once ("network timeout", "quota exceeded,
resource unavailable").
"""

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from sample_discovery.domain.models import (
    ErrorClassification,
    ErrorKind,
    ErrorSeverity,
)

logger = structlog.get_logger()

CONNECTIVITY_KEYWORDS = (
    "network",
    "fetch",
    "connection",
    "connect",
    "timeout",
    "timed out",
    "socket",
    "offline",
    "dns",
    "unreachable",
)
CORS_KEYWORDS = ("cors", "cross-origin")
NOT_FOUND_KEYWORDS = ("not found", "unavailable")
RATE_LIMIT_KEYWORDS = ("too many requests", "rate limit")
TIMEOUT_KEYWORDS = ("timeout", "timed out")
NETWORK_KEYWORDS = ("network", "fetch", "connection", "socket")

TIMEOUT_ERRORS: tuple[type[BaseException], ...] = (TimeoutError, asyncio.TimeoutError)
CONNECTION_ERRORS: tuple[type[BaseException], ...] = (ConnectionError,)

USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NETWORK_OFFLINE: "You are offline. Showing cached samples.",
    ErrorKind.NETWORK_TIMEOUT: "Request timed out. Retrying with demo samples.",
    ErrorKind.NETWORK_GENERIC: "Connection issue. Retrying...",
    ErrorKind.CORS_BLOCKED: "Service configuration issue. Using demo samples.",
    ErrorKind.QUOTA_EXCEEDED: (
        "YouTube API quota exceeded. Showing demo samples instead."
    ),
    ErrorKind.RATE_LIMITED: "Too many requests. Please wait a moment.",
    ErrorKind.RESOURCE_UNAVAILABLE: (
        "This video is not available. Try a different sample."
    ),
    ErrorKind.UNKNOWN_UPSTREAM: "YouTube service temporarily unavailable.",
}


def _classification(
    kind: ErrorKind,
    severity: ErrorSeverity,
    retryable: bool,
    fallback_eligible: bool,
    retry_after_ms: int | None = None,
) -> ErrorClassification:
    return ErrorClassification(
        kind=kind,
        severity=severity,
        retryable=retryable,
        fallback_eligible=fallback_eligible,
        retry_after_ms=retry_after_ms,
        user_message=USER_MESSAGES[kind],
    )


# Used when a call skips a degraded dependency before any failure was seen.
DEGRADED_SERVICE_CLASSIFICATION = _classification(
    ErrorKind.UNKNOWN_UPSTREAM, ErrorSeverity.WARNING, True, True
)


def extract_message(error: Any) -> str:
    """Get the human-readable message of a raw failure."""
    if error is None:
        return ""
    if isinstance(error, str):
        return error
    if isinstance(error, Mapping):
        return str(error.get("message") or "")
    return str(error)


def extract_status(error: Any) -> int | None:
    """Get the HTTP status carried by a raw failure, if any."""
    if error is None or isinstance(error, str):
        return None

    if isinstance(error, Mapping):
        candidates = [error.get("status"), error.get("status_code"), error.get("code")]
    else:
        response = getattr(error, "response", None)
        candidates = [
            getattr(error, "status", None),
            getattr(error, "status_code", None),
            getattr(error, "code", None),
            getattr(response, "status_code", None),
        ]

    for candidate in candidates:
        if isinstance(candidate, bool):
            continue
        if isinstance(candidate, int):
            return candidate
        if isinstance(candidate, str) and candidate.isdigit():
            return int(candidate)
    return None


def _mentions(message: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in message for keyword in keywords)


def _is_connectivity_error(error: Any, message: str) -> bool:
    if isinstance(error, TIMEOUT_ERRORS + CONNECTION_ERRORS):
        return True
    return _mentions(message, CONNECTIVITY_KEYWORDS)


def classify(error: Any, *, is_online: bool = True) -> ErrorClassification:
    """Classify a raw failure.

    Args:
        error: Exception, mapping with ``message``/``status``, string or None
        is_online: Current host connectivity signal

    Returns:
        A fresh, immutable classification
    """
    message = extract_message(error).lower()
    status = extract_status(error)

    if not is_online and _is_connectivity_error(error, message):
        return _classification(
            ErrorKind.NETWORK_OFFLINE, ErrorSeverity.WARNING, False, True
        )

    if _mentions(message, CORS_KEYWORDS):
        return _classification(ErrorKind.CORS_BLOCKED, ErrorSeverity.ERROR, False, True)

    if "quota" in message or (
        status == 403 and ("limit" in message or "exceeded" in message)
    ):
        return _classification(
            ErrorKind.QUOTA_EXCEEDED, ErrorSeverity.WARNING, False, True, 3_600_000
        )

    if status == 404 or _mentions(message, NOT_FOUND_KEYWORDS):
        return _classification(
            ErrorKind.RESOURCE_UNAVAILABLE, ErrorSeverity.WARNING, False, False
        )

    if status == 429 or _mentions(message, RATE_LIMIT_KEYWORDS):
        return _classification(
            ErrorKind.RATE_LIMITED, ErrorSeverity.WARNING, True, True, 60_000
        )

    if isinstance(error, TIMEOUT_ERRORS) or _mentions(message, TIMEOUT_KEYWORDS):
        return _classification(
            ErrorKind.NETWORK_TIMEOUT, ErrorSeverity.WARNING, True, True, 10_000
        )

    if isinstance(error, CONNECTION_ERRORS) or _mentions(message, NETWORK_KEYWORDS):
        return _classification(
            ErrorKind.NETWORK_GENERIC, ErrorSeverity.WARNING, True, True, 5_000
        )

    return _classification(ErrorKind.UNKNOWN_UPSTREAM, ErrorSeverity.ERROR, True, True)


class ErrorClassifier:
    """Classifier bound to a live connectivity signal."""

    def __init__(self, connectivity: Callable[[], bool] | None = None):
        """Initialize classifier.

        Args:
            connectivity: Returns True while the host is online. Defaults to
                always online.
        """
        self._connectivity = connectivity or (lambda: True)

    def is_online(self) -> bool:
        return bool(self._connectivity())

    def classify(self, error: Any) -> ErrorClassification:
        """Classify ``error`` against the current connectivity signal."""
        classification = classify(error, is_online=self.is_online())
        logger.debug(
            "Classified provider failure",
            error_kind=classification.kind.value,
            retryable=classification.retryable,
            fallback_eligible=classification.fallback_eligible,
        )
        return classification

"""Error classification for provider failures.

Maps raw failures onto a closed taxonomy that drives retry, fallback and
user messaging decisions.
"""

from .classifier import (
    DEGRADED_SERVICE_CLASSIFICATION,
    ErrorClassifier,
    classify,
    extract_message,
    extract_status,
)

__all__ = [
    "DEGRADED_SERVICE_CLASSIFICATION",
    "ErrorClassifier",
    "classify",
    "extract_message",
    "extract_status",
]

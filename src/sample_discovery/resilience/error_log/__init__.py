"""Bounded diagnostic error log.

Keeps the most recent failures in memory, persists them to a key-value store
and forwards each new record to an optional external reporter.
"""

from .log import DEFAULT_CAPACITY, DEFAULT_STORAGE_KEY, ErrorLog, ErrorReporter

__all__ = [
    "ErrorLog",
    "ErrorReporter",
    "DEFAULT_CAPACITY",
    "DEFAULT_STORAGE_KEY",
]

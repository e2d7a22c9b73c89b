"""
Key-value store interface for small persisted documents.

The error log persists its records through this interface so the backing
store can be swapped between an in-memory fake and a file on disk.
"""

from typing import Protocol


class StorageError(Exception):
    """Raised when a store cannot read or write a value."""


class KeyValueStore(Protocol):
    """String key-value store interface."""

    def get(self, key: str) -> str | None:
        """Get the value stored under ``key``."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        ...

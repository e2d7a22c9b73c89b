"""
In-memory key-value store for development and testing.

Non-persistent storage backed by a dictionary. ``fail_writes`` lets tests
simulate a full or unavailable store.
"""

from .base import StorageError


class InMemoryKeyValueStore:
    """In-memory storage for development and testing."""

    def __init__(self, fail_writes: bool = False) -> None:
        self._data: dict[str, str] = {}
        self.fail_writes = fail_writes

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError(f"Write rejected for key: {key}")
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data.keys())

"""Key-value storage backends."""

from .base import KeyValueStore, StorageError
from .file import JsonFileKeyValueStore
from .memory import InMemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "StorageError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]

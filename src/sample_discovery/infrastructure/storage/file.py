"""
JSON file-backed key-value store.

All keys live in one JSON object on disk. Writes go to a temporary file that
is then renamed over the original, so a crash never leaves a truncated
document behind.
"""

import json
import os
from pathlib import Path

import structlog

from .base import StorageError

logger = structlog.get_logger()


class JsonFileKeyValueStore:
    """Key-value store persisted as a single JSON document."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(
                "Could not read key-value store, starting empty",
                path=str(self.path),
                error=str(e),
            )
            return {}

        if not isinstance(data, dict):
            logger.warning("Key-value store is not a JSON object", path=str(self.path))
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

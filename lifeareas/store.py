"""Key-value persistence used by every list in LifeAreas.

A store maps string keys to JSON-serializable values. The library only
needs ``get`` and ``set``; two implementations are provided: an in-memory
one (tests, ephemeral sessions) and a single JSON document on disk.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Protocol

from lifeareas.fileio import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the backing file cannot be read or written."""


class Store(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """Dict-backed store. Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


class JsonFileStore:
    """All keys in one JSON object, rewritten atomically on every set."""

    def __init__(self, path: Path) -> None:
        self.path = path
        try:
            self._data = read_json(path)
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read store {path}: {e}") from e

    def get(self, key: str) -> Any | None:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        # round-trip through json so unserializable values fail before the write
        try:
            self._data[key] = json.loads(json.dumps(value, ensure_ascii=False))
        except (TypeError, ValueError) as e:
            raise StoreError(f"Value for {key!r} is not JSON-serializable: {e}") from e
        try:
            write_json_atomic(self.path, self._data)
        except OSError as e:
            logger.error("Failed to write store %s (key %s): %s", self.path, key, e)
            raise StoreError(f"Cannot write store {self.path}: {e}") from e

"""
Key-value stores for persisted lawn state.

The repository only needs get/set by logical key; the host picks the medium.
"""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional


class KeyValueStore:
    """Minimal key-value interface holding JSON-compatible values."""

    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class InMemoryStore(KeyValueStore):
    """Store backed by a dictionary; values are copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JSONFileStore(KeyValueStore):
    """
    Store persisting all keys in a single JSON file.

    Every write goes to a temporary file that atomically replaces the
    state file.
    """

    def __init__(self, path: str, logger: Optional[logging.Logger] = None):
        """
        Initialize file store.

        Args:
            path: Path of the JSON file (created on first write)
            logger: Logger instance
        """
        self.path = Path(path)
        self.logger = logger or logging.getLogger(__name__)
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            self.logger.info(f"No state file at {self.path}, starting empty")
            return {}

        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"State file {self.path} does not contain a JSON object")
        return data

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        self.logger.debug(f"Saved state to {self.path}")

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self._flush()

    def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

"""
User preference storage: typed get/set of small key-value pairs.

Robustness features of the JSON file store:
- Graceful handling of corrupt or unreadable files (never crashes, logs the
  problem and starts from an empty set of preferences).
- Writes go to a temporary file that replaces the original, so a crash
  mid-write never leaves a truncated file behind.
- Thread-safe via an instance lock.
- reload() re-reads the file from disk.
"""

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, TypeVar

from ..config import get_preferences_path

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PreferenceStore(ABC):
    """Key-value store for persisted user preferences."""

    @abstractmethod
    def get(self, key: str, default: T) -> T: ...

    @abstractmethod
    def set(self, key: str, value: Any): ...


class MemoryPreferenceStore(PreferenceStore):
    """Process-local store, mostly for tests and embedding."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: T) -> T:
        return self._values.get(key, default)

    def set(self, key: str, value: Any):
        self._values[key] = value


class JsonPreferenceStore(PreferenceStore):
    """Preferences persisted as a flat JSON object in a single file."""

    def __init__(self, path: Path | None = None):
        self._path = path or get_preferences_path()
        self._lock = threading.Lock()
        self._values: dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self):
        if not self._path.exists():
            logger.info("Preferences file %s does not exist yet", self._path)
            self._values = {}
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read preferences from %s: %s", self._path, e)
            self._values = {}
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: top level is not an object", self._path)
            data = {}
        self._values = data

    def reload(self):
        with self._lock:
            self._load()

    def get(self, key: str, default: T) -> T:
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any):
        with self._lock:
            self._values[key] = value
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(self._values, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp_path, self._path)

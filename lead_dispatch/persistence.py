"""Key-value persistence collaborators for selection and credit state."""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

LOGGER = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Opaque get/set storage that survives process restarts."""

    def get(self, key: str) -> Optional[str]:  # pragma: no cover - runtime protocol
        """Return the stored value or ``None``."""

    def set(self, key: str, value: str) -> None:  # pragma: no cover - runtime protocol
        """Store ``value`` under ``key``."""


class InMemoryStore:
    """Dictionary backed store, mostly useful for tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store every key in a single JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")

    def _read(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        text = self._path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            LOGGER.warning("State file %s is not valid JSON; starting empty", self._path)
            return {}
        if not isinstance(data, dict):
            LOGGER.warning("State file %s does not hold a JSON object; starting empty", self._path)
            return {}
        return data


__all__ = ["InMemoryStore", "JsonFileStore", "KeyValueStore"]

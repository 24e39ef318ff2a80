"""Stores for persisted client-side session artifacts."""

import json
import logging
import threading
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class MemoryArtifactStore:
    """Key-value store held in memory."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._items: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._items.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class FileArtifactStore:
    """Key-value store persisted as a JSON object on disk.

    Behaves like browser local storage: values survive restarts and
    ``remove`` of a missing key does nothing.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: JSON file holding the stored items. Created on first write.
        """
        self._path = path
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            items = self._load()
            items[key] = value
            self._save(items)

    def remove(self, key: str) -> None:
        with self._lock:
            items = self._load()
            if key not in items:
                return
            del items[key]
            self._save(items)
            logger.debug("Removed %s from %s", key, self._path)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._load()

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text())
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt artifact store at %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, items: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(items, indent=2))

"""Storage service interfaces and implementations.

Provides the abstract key-value store used for watchlist, portfolio and
settings state, a JSON file-based implementation that survives restarts,
and an in-memory implementation for tests and ephemeral sessions.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


WATCHLIST_KEY = "watchlist"
PORTFOLIO_KEY = "portfolio"
SETTINGS_KEY = "app_settings"


class IStorageService(ABC):
    """Abstract base class for storage services.

    Defines the interface for saving, loading, and deleting
    JSON-serializable data with string keys.
    """

    @abstractmethod
    def save(self, key: str, data: Any) -> None:
        """Save data with the given key, replacing any previous value.

        Args:
            key: Unique identifier for the data
            data: JSON-serializable data to store
        """
        ...

    @abstractmethod
    def load(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        """Load data for the given key.

        Args:
            key: Unique identifier for the data
            default: Value returned when the key is absent or unreadable

        Returns:
            The stored data, or ``default``
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete data for the given key.

        Args:
            key: Unique identifier for the data to delete
        """
        ...


class JsonFileStorage(IStorageService):
    """JSON file-based storage implementation.

    Stores each key as a separate JSON file in the specified base directory.
    Uses pathlib for cross-platform file path handling.
    """

    def __init__(self, base_path: str | Path) -> None:
        """Initialize the JSON file storage.

        Args:
            base_path: Directory path where JSON files will be stored
        """
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base_path

    def _get_file_path(self, key: str) -> Path:
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self._base_path / f"{safe_key}.json"

    def save(self, key: str, data: Any) -> None:
        """Save data to a JSON file.

        Raises:
            TypeError: If data is not JSON-serializable
            OSError: If file cannot be written
        """
        file_path = self._get_file_path(key)
        try:
            payload = json.dumps(data, indent=2, ensure_ascii=False)
            file_path.write_text(payload, encoding="utf-8")
        except (TypeError, OSError) as e:
            logger.error(f"Failed to save data for key '{key}': {e}")
            raise

    def load(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        """Load data from a JSON file.

        Returns ``default`` if the file doesn't exist or is corrupted.
        """
        file_path = self._get_file_path(key)
        if not file_path.exists():
            return default

        try:
            with file_path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted data for key '{key}': {e}")
            return default
        except OSError as e:
            logger.error(f"Failed to load data for key '{key}': {e}")
            return default

    def delete(self, key: str) -> None:
        file_path = self._get_file_path(key)
        try:
            if file_path.exists():
                file_path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete data for key '{key}': {e}")


class InMemoryStorage(IStorageService):
    """Dict-backed storage with the same value semantics as the file store.

    Values are kept JSON-encoded so callers never share mutable state with
    the store, and non-serializable data fails on save exactly like it
    would on disk.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        # key -> raw JSON text; lets tests seed corrupted payloads
        self._data: Dict[str, str] = dict(initial or {})

    def save(self, key: str, data: Any) -> None:
        self._data[key] = json.dumps(data)

    def load(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return copy.deepcopy(default)
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted data for key '{key}': {e}")
            return copy.deepcopy(default)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def raw(self, key: str) -> Optional[str]:
        """Return the stored JSON text for ``key`` (None if absent)."""
        return self._data.get(key)

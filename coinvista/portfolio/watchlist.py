"""Watchlist of coin identifiers, persisted on every change."""

from __future__ import annotations

import logging
from typing import Iterator, List

from coinvista.storage.storage import WATCHLIST_KEY, IStorageService

logger = logging.getLogger(__name__)


class Watchlist:
    """Insertion-ordered set of coin ids backed by a storage service.

    Membership only, no metadata. Mutations that change the set are written
    through to storage immediately; no-op mutations do not write.
    """

    def __init__(self, storage: IStorageService, key: str = WATCHLIST_KEY) -> None:
        self._storage = storage
        self._key = key
        self._ids: List[str] = self._load()

    def _load(self) -> List[str]:
        data = self._storage.load(self._key, [])
        if not isinstance(data, list):
            logger.warning(f"Malformed watchlist under '{self._key}', starting empty")
            return []
        # De-dupe while preserving order
        seen: set[str] = set()
        cleaned: List[str] = []
        for item in data:
            if isinstance(item, str) and item and item not in seen:
                seen.add(item)
                cleaned.append(item)
        if len(cleaned) != len(data):
            logger.warning(f"Dropped {len(data) - len(cleaned)} invalid or duplicate watchlist entries")
        return cleaned

    def _save(self) -> None:
        self._storage.save(self._key, list(self._ids))

    def ids(self) -> List[str]:
        return list(self._ids)

    def contains(self, coin_id: str) -> bool:
        return coin_id in self._ids

    def add(self, coin_id: str) -> bool:
        """Add ``coin_id``; returns False if it was already present."""
        if not coin_id:
            raise ValueError("coin_id is required")
        if coin_id in self._ids:
            return False
        self._ids.append(coin_id)
        self._save()
        return True

    def remove(self, coin_id: str) -> bool:
        """Remove ``coin_id``; removing an absent id is a no-op returning False."""
        if coin_id not in self._ids:
            return False
        self._ids.remove(coin_id)
        self._save()
        return True

    def toggle(self, coin_id: str) -> bool:
        """Flip membership of ``coin_id`` and return the new membership."""
        if coin_id in self._ids:
            self.remove(coin_id)
            return False
        self.add(coin_id)
        return True

    def __contains__(self, coin_id: object) -> bool:
        return coin_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

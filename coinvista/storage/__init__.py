"""Persistence services for watchlist, portfolio and settings state."""

from coinvista.storage.storage import (
    PORTFOLIO_KEY,
    SETTINGS_KEY,
    WATCHLIST_KEY,
    IStorageService,
    InMemoryStorage,
    JsonFileStorage,
)

__all__ = [
    "IStorageService",
    "JsonFileStorage",
    "InMemoryStorage",
    "WATCHLIST_KEY",
    "PORTFOLIO_KEY",
    "SETTINGS_KEY",
]

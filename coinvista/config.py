"""Application settings.

Settings live in the key-value store under ``app_settings`` and can be
overridden from the environment at startup.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, fields
from typing import Optional

from coinvista.storage.storage import SETTINGS_KEY, IStorageService
from coinvista.util.env import env_float, env_str

logger = logging.getLogger(__name__)


@dataclass
class AppSettings:
    """Application settings model."""
    vs_currency: str = "usd"
    markets_page_size: int = 100
    markets_interval_s: int = 30
    watchlist_interval_s: int = 30
    portfolio_interval_s: int = 30
    global_interval_s: int = 60
    sentiment_interval_s: int = 60
    timeout_s: float = 7.0
    use_os_trust_store: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create from dictionary, ignoring unknown or mistyped entries."""
        settings = cls()
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            default = getattr(settings, f.name)
            # bool is an int subclass; keep flags and numbers apart
            if isinstance(default, bool):
                if isinstance(value, bool):
                    setattr(settings, f.name, value)
            elif isinstance(default, (int, float)):
                if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
                    # cast first: int(0.5) is 0
                    cast = type(default)(value)
                    if cast > 0:
                        setattr(settings, f.name, cast)
            elif isinstance(value, str) and value:
                setattr(settings, f.name, value)
        return settings


def load_settings(storage: Optional[IStorageService] = None) -> AppSettings:
    """Build settings from stored values, then environment overrides."""
    settings = AppSettings()
    if storage is not None:
        data = storage.load(SETTINGS_KEY)
        if isinstance(data, dict):
            settings = AppSettings.from_dict(data)
        elif data is not None:
            logger.warning(f"Ignoring malformed settings of type {type(data).__name__}")

    currency = env_str("COINVISTA_VS_CURRENCY")
    if currency:
        settings.vs_currency = currency.lower()
    timeout = env_float("COINVISTA_TIMEOUT")
    if timeout and timeout > 0:
        settings.timeout_s = timeout
    return settings


def save_settings(storage: IStorageService, settings: AppSettings) -> None:
    storage.save(SETTINGS_KEY, settings.to_dict())

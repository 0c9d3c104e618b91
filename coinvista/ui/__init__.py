"""Presentation helpers consumed by dashboard views."""

from coinvista.ui.formatting import (
    description_excerpt,
    format_allocation,
    format_change,
    format_large_usd,
    format_market_cap,
    format_price,
    format_supply,
    sentiment_band,
)

__all__ = [
    "description_excerpt",
    "format_allocation",
    "format_change",
    "format_large_usd",
    "format_market_cap",
    "format_price",
    "format_supply",
    "sentiment_band",
]

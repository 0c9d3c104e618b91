"""Display formatting for prices, market figures and percentages."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union

Number = Union[Decimal, float, int]


def format_price(price: Number) -> str:
    """Price with precision that scales with magnitude.

    Below 1: 6 decimals; below 100: 4 decimals; otherwise 2 decimals with
    thousands separators.
    """
    v = Decimal(str(price))
    if v < 1:
        return f"${v:.6f}"
    if v < 100:
        return f"${v:.4f}"
    return f"${v:,.2f}"


def _suffixed(v: Decimal) -> Optional[str]:
    for threshold, suffix in ((Decimal("1e12"), "T"), (Decimal("1e9"), "B"), (Decimal("1e6"), "M")):
        if v >= threshold:
            return f"${v / threshold:.2f}{suffix}"
    return None


def format_market_cap(value: Number) -> str:
    """Compact money figure: $1.23T / $4.56B / $7.89M, plain below a million."""
    v = Decimal(str(value))
    return _suffixed(v) or f"${v:,}"


def format_large_usd(value: Optional[Number]) -> str:
    """Like ``format_market_cap`` but "$0" for missing values and 2 decimals below a million."""
    if not value:
        return "$0"
    v = Decimal(str(value))
    return _suffixed(v) or f"${v:.2f}"


def format_change(pct: Number) -> str:
    """Signed percent change with 2 decimals, e.g. "+1.25%" or "-0.40%"."""
    v = float(pct)
    sign = "+" if v >= 0 else "-"
    return f"{sign}{abs(v):.2f}%"


def format_allocation(pct: Number) -> str:
    return f"{float(pct):.1f}%"


def format_supply(supply: Number, symbol: str = "") -> str:
    text = f"{Decimal(str(supply)):,.0f}"
    return f"{text} {symbol.upper()}".rstrip()


def description_excerpt(text: str, sentences: int = 3) -> str:
    """First ``sentences`` sentences of a coin description."""
    if not text:
        return ""
    parts = text.split(". ")
    excerpt = ". ".join(parts[:sentences])
    return excerpt if excerpt.endswith(".") else excerpt + "."


def sentiment_band(value: int) -> str:
    """Bucket a 0-100 sentiment reading for colouring."""
    if value < 25:
        return "extreme_fear"
    if value < 45:
        return "fear"
    if value < 55:
        return "neutral"
    if value < 75:
        return "greed"
    return "extreme_greed"

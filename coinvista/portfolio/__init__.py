"""Watchlist, holdings book, input validation and portfolio valuation."""

from .models import Holding
from .book import PortfolioBook
from .watchlist import Watchlist
from .validation import HoldingInputValidator, ValidationState
from .valuation import (
    EMPTY_VALUATION,
    HoldingValuation,
    PortfolioValuation,
    percent_of,
    price_gain_percent,
    value_portfolio,
)

__all__ = [
    "Holding",
    "PortfolioBook",
    "Watchlist",
    "HoldingInputValidator",
    "ValidationState",
    "HoldingValuation",
    "PortfolioValuation",
    "EMPTY_VALUATION",
    "percent_of",
    "price_gain_percent",
    "value_portfolio",
]

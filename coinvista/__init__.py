"""CoinVista: crypto market dashboard core (market data, watchlist, portfolio valuation)."""

__version__ = "0.1.0"

"""Market data gateway: CoinGecko REST client and the records it returns."""

from coinvista.data.models import (
    NEUTRAL_SENTIMENT,
    Coin,
    CoinDetail,
    GlobalStats,
    PricePoint,
    SentimentIndex,
)
from coinvista.data.providers import CHART_RANGES, CoinGeckoRestProvider

__all__ = [
    "Coin",
    "CoinDetail",
    "GlobalStats",
    "PricePoint",
    "SentimentIndex",
    "NEUTRAL_SENTIMENT",
    "CHART_RANGES",
    "CoinGeckoRestProvider",
]

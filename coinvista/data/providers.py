from __future__ import annotations

import logging
import ssl
import threading
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

import certifi
import httpx
import truststore

from coinvista.data.models import (
    NEUTRAL_SENTIMENT,
    Coin,
    CoinDetail,
    GlobalStats,
    PricePoint,
    SentimentIndex,
    to_decimal,
)
from coinvista.errors import GatewayError, NetworkFailure, ParseFailure

logger = logging.getLogger(__name__)

COINGECKO_BASE = "https://api.coingecko.com/api/v3"
FEAR_GREED_URL = "https://api.alternative.me/fng/"

# Chart range buttons: label -> trailing window in days
CHART_RANGES: Dict[str, int] = {"1D": 1, "7D": 7, "1M": 30, "1Y": 365}

T = TypeVar("T")


class CoinGeckoRestProvider:
    """Request/response client for the CoinGecko public API.

    Stateless apart from the HTTP connection pool: no caching, batching or
    retries. Every failure surfaces as a ``GatewayError`` subclass.
    """

    def __init__(
        self,
        timeout_s: float = 7.0,
        vs_currency: str = "usd",
        page_size: int = 100,
        use_os_trust_store: bool = True,
    ) -> None:
        self._client = httpx.Client(
            base_url=COINGECKO_BASE,
            timeout=timeout_s,
            verify=self._make_ssl_context(use_os_trust_store),
            headers={"Accept": "application/json"},
        )
        self._lock = threading.Lock()
        self.vs_currency = vs_currency.lower()
        self.page_size = int(page_size)

    # ----- Markets -----
    def list_markets(self, ids: Optional[Iterable[str]] = None) -> List[Coin]:
        """Coins ranked by market cap, descending.

        Args:
            ids: Restrict the listing to these coin ids. An empty collection
                returns an empty list without issuing a request.
        """
        params: Dict[str, Any] = {
            "vs_currency": self.vs_currency,
            "order": "market_cap_desc",
            "per_page": self.page_size,
            "page": 1,
            "sparkline": "false",
        }
        if ids is not None:
            wanted = [i for i in ids if i]
            if not wanted:
                return []
            params["ids"] = ",".join(wanted)
            params["per_page"] = max(self.page_size, len(wanted))
        data = self._get_json("/coins/markets", params)
        if not isinstance(data, list):
            raise ParseFailure("Markets response is not a list")
        coins = self._parse(lambda: [Coin.from_api(row) for row in data])
        return sorted(coins, key=lambda c: (c.market_cap_rank == 0, c.market_cap_rank))

    def get_global_stats(self) -> GlobalStats:
        data = self._get_json("/global")
        return self._parse(lambda: GlobalStats.from_api(data, self.vs_currency))

    def get_coin_detail(self, coin_id: str) -> CoinDetail:
        data = self._get_json(f"/coins/{coin_id}")
        return self._parse(lambda: CoinDetail.from_api(data, self.vs_currency))

    def get_price_history(self, coin_id: str, range_days: int) -> List[PricePoint]:
        """Price samples covering the trailing ``range_days`` window, oldest first."""
        if isinstance(range_days, bool) or not isinstance(range_days, int) or range_days <= 0:
            raise ValueError(f"range_days must be a positive integer, got {range_days!r}")
        data = self._get_json(
            f"/coins/{coin_id}/market_chart",
            {"vs_currency": self.vs_currency, "days": range_days},
        )
        rows = data.get("prices") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise ParseFailure("Market chart response has no 'prices' list")
        points = self._parse(lambda: [PricePoint.from_api(row) for row in rows])
        return sorted(points, key=lambda p: p.timestamp)

    # ----- Spot prices -----
    def get_spot_price(self, coin_id: str) -> Decimal:
        data = self._get_json(
            "/simple/price",
            {"ids": coin_id, "vs_currencies": self.vs_currency},
        )
        entry = data.get(coin_id) if isinstance(data, dict) else None
        if not isinstance(entry, dict) or self.vs_currency not in entry:
            raise ParseFailure(f"No {self.vs_currency} price for '{coin_id}'")
        return to_decimal(entry[self.vs_currency])

    def get_spot_prices(self, coin_ids: Iterable[str]) -> Dict[str, Decimal]:
        """One spot-price request per distinct id; any failure fails the call."""
        out: Dict[str, Decimal] = {}
        for cid in coin_ids:
            if cid in out:
                continue
            out[cid] = self.get_spot_price(cid)
        return out

    # ----- Sentiment -----
    def get_sentiment(self) -> SentimentIndex:
        """Fear & greed index; falls back to a neutral reading on any failure."""
        try:
            data = self._get_json(FEAR_GREED_URL)
            entry = data["data"][0]
            return SentimentIndex(
                value=int(entry["value"]),
                classification=str(entry["value_classification"]),
            )
        except GatewayError as e:
            logger.warning(f"Sentiment index unavailable, using neutral: {e}")
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Malformed sentiment index, using neutral: {e}")
        return NEUTRAL_SENTIMENT

    def close(self) -> None:
        self._client.close()

    # ----- Internals -----
    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            with self._lock:
                r = self._client.get(url, params=params)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise NetworkFailure(f"GET {url} failed with status {status}", status_code=status) from e
        except httpx.HTTPError as e:
            raise NetworkFailure(f"GET {url} failed: {e}") from e
        try:
            return r.json()
        except ValueError as e:
            raise ParseFailure(f"GET {url} returned invalid JSON") from e

    @staticmethod
    def _parse(build: Callable[[], T]) -> T:
        try:
            return build()
        except ParseFailure:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ParseFailure(f"Unexpected response shape: {e}") from e

    def _make_ssl_context(self, use_os_trust_store: bool) -> ssl.SSLContext:
        if use_os_trust_store:
            return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        return ssl.create_default_context(cafile=certifi.where())

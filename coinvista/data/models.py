"""Market data records returned by the gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional

from coinvista.errors import ParseFailure


def to_decimal(value: Any) -> Decimal:
    """Convert an API number to Decimal; null becomes 0."""
    if value is None:
        return Decimal("0")
    if isinstance(value, bool):
        raise ParseFailure(f"Expected a number, got {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ParseFailure(f"Expected a number, got {value!r}") from e
    if not result.is_finite():
        raise ParseFailure(f"Expected a finite number, got {value!r}")
    return result


def to_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ParseFailure(f"Expected a number, got {value!r}") from e


def _require(obj: Mapping[str, Any], key: str) -> Any:
    try:
        return obj[key]
    except (KeyError, TypeError) as e:
        raise ParseFailure(f"Missing field '{key}'") from e


@dataclass(frozen=True)
class Coin:
    """One row of the markets listing.

    Attributes:
        id: Provider identifier, unique (e.g. "bitcoin")
        symbol: Ticker symbol (e.g. "btc")
        name: Display name
        image: Image URL
        current_price: Price per unit in the display currency
        price_change_percentage_24h: 24h change in percent
        market_cap: Market capitalization
        total_volume: 24h trading volume
        circulating_supply: Units in circulation
        market_cap_rank: 1 = largest market cap (0 when unranked)
    """
    id: str
    symbol: str
    name: str
    image: str
    current_price: Decimal
    price_change_percentage_24h: float
    market_cap: Decimal
    total_volume: Decimal
    circulating_supply: Decimal
    market_cap_rank: int

    @classmethod
    def from_api(cls, obj: Mapping[str, Any]) -> "Coin":
        rank = obj.get("market_cap_rank") if isinstance(obj, Mapping) else None
        return cls(
            id=str(_require(obj, "id")),
            symbol=str(obj.get("symbol") or ""),
            name=str(obj.get("name") or ""),
            image=str(obj.get("image") or ""),
            current_price=to_decimal(obj.get("current_price")),
            price_change_percentage_24h=to_float(obj.get("price_change_percentage_24h")),
            market_cap=to_decimal(obj.get("market_cap")),
            total_volume=to_decimal(obj.get("total_volume")),
            circulating_supply=to_decimal(obj.get("circulating_supply")),
            market_cap_rank=int(rank) if isinstance(rank, (int, float)) and rank > 0 else 0,
        )


@dataclass(frozen=True)
class GlobalStats:
    """Aggregate market totals from the global endpoint."""
    total_market_cap: Decimal
    total_volume: Decimal
    btc_dominance: float
    eth_dominance: float
    market_cap_change_24h: float
    active_cryptocurrencies: int = 0
    markets: int = 0

    @classmethod
    def from_api(cls, payload: Mapping[str, Any], vs_currency: str = "usd") -> "GlobalStats":
        data = _require(payload, "data")
        if not isinstance(data, Mapping):
            raise ParseFailure("Global stats 'data' is not an object")
        caps = data.get("total_market_cap") or {}
        volumes = data.get("total_volume") or {}
        dominance = data.get("market_cap_percentage") or {}
        return cls(
            total_market_cap=to_decimal(caps.get(vs_currency)),
            total_volume=to_decimal(volumes.get(vs_currency)),
            btc_dominance=to_float(dominance.get("btc")),
            eth_dominance=to_float(dominance.get("eth")),
            market_cap_change_24h=to_float(data.get(f"market_cap_change_percentage_24h_{vs_currency}")),
            active_cryptocurrencies=int(data.get("active_cryptocurrencies") or 0),
            markets=int(data.get("markets") or 0),
        )


@dataclass(frozen=True)
class CoinDetail:
    """Extended single-coin record with description and links."""
    id: str
    symbol: str
    name: str
    image: str
    current_price: Decimal
    price_change_percentage_24h: float
    market_cap: Decimal
    total_volume: Decimal
    circulating_supply: Decimal
    max_supply: Optional[Decimal]
    market_cap_rank: int
    description: str = ""
    homepage: Optional[str] = None
    explorer: Optional[str] = None
    homepages: List[str] = field(default_factory=list)
    explorers: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, obj: Mapping[str, Any], vs_currency: str = "usd") -> "CoinDetail":
        market = _require(obj, "market_data")
        if not isinstance(market, Mapping):
            raise ParseFailure("Coin detail 'market_data' is not an object")
        image = obj.get("image") or {}
        links = obj.get("links") or {}
        homepages = [u for u in links.get("homepage") or [] if isinstance(u, str) and u]
        explorers = [u for u in links.get("blockchain_site") or [] if isinstance(u, str) and u]
        max_supply = market.get("max_supply")
        rank = market.get("market_cap_rank") or obj.get("market_cap_rank")
        return cls(
            id=str(_require(obj, "id")),
            symbol=str(obj.get("symbol") or ""),
            name=str(obj.get("name") or ""),
            image=str(image.get("large") or "") if isinstance(image, Mapping) else str(image),
            current_price=to_decimal((market.get("current_price") or {}).get(vs_currency)),
            price_change_percentage_24h=to_float(market.get("price_change_percentage_24h")),
            market_cap=to_decimal((market.get("market_cap") or {}).get(vs_currency)),
            total_volume=to_decimal((market.get("total_volume") or {}).get(vs_currency)),
            circulating_supply=to_decimal(market.get("circulating_supply")),
            max_supply=to_decimal(max_supply) if max_supply else None,
            market_cap_rank=int(rank) if isinstance(rank, (int, float)) and rank > 0 else 0,
            description=str((obj.get("description") or {}).get("en") or ""),
            homepage=homepages[0] if homepages else None,
            explorer=explorers[0] if explorers else None,
            homepages=homepages,
            explorers=explorers,
        )


@dataclass(frozen=True)
class PricePoint:
    """One historical price sample."""
    timestamp: datetime
    price: Decimal

    @classmethod
    def from_api(cls, row: Any) -> "PricePoint":
        try:
            ts_ms, price = row[0], row[1]
            ts = datetime.fromtimestamp(float(ts_ms) / 1000.0, tz=timezone.utc)
        except (TypeError, ValueError, IndexError, KeyError, OverflowError, OSError) as e:
            raise ParseFailure(f"Malformed price point {row!r}") from e
        return cls(timestamp=ts, price=to_decimal(price))


@dataclass(frozen=True)
class SentimentIndex:
    """Fear & greed style market sentiment reading (0-100)."""
    value: int
    classification: str


NEUTRAL_SENTIMENT = SentimentIndex(value=50, classification="Neutral")

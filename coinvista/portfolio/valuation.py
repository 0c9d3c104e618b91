"""Portfolio valuation and allocation.

Combines stored holdings with live prices. Everything here is a pure
function of its inputs and is recomputed on every price or holdings change;
nothing is cached or persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Mapping, Optional, Sequence

from .models import Holding

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """``part / whole * 100``, defined as 0 when ``whole`` is 0."""
    if whole == ZERO:
        return ZERO
    return part / whole * HUNDRED


@dataclass(frozen=True)
class HoldingValuation:
    """Derived figures for one holding.

    Attributes:
        holding: The underlying lot
        price: Live price used (0 when unknown)
        value: quantity * price
        cost: quantity * buy_price
        profit_loss: value - cost
        profit_loss_percent: profit_loss / cost * 100 (0 when cost is 0)
        allocation: value / total portfolio value * 100 (0 when total is 0)
    """
    holding: Holding
    price: Decimal
    value: Decimal
    cost: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    allocation: Decimal


@dataclass(frozen=True)
class PortfolioValuation:
    """Aggregate portfolio figures plus the per-holding breakdown."""
    holdings: List[HoldingValuation]
    total_value: Decimal
    total_cost: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    best_performer: Optional[HoldingValuation]
    best_performer_gain: Decimal

    @property
    def asset_count(self) -> int:
        return len(self.holdings)

    @property
    def is_empty(self) -> bool:
        return not self.holdings


def price_gain_percent(price: Decimal, buy_price: Decimal) -> Optional[Decimal]:
    """Percentage move from buy price to ``price``; None when buy price is 0."""
    if buy_price == ZERO:
        return None
    return (price - buy_price) / buy_price * HUNDRED


def value_portfolio(
    holdings: Sequence[Holding],
    prices: Mapping[str, Decimal],
) -> PortfolioValuation:
    """Value ``holdings`` against ``prices`` (coin id -> price).

    Coins without a price are valued at 0. The best performer is the first
    holding with the highest gain over its buy price; lots with a zero buy
    price have no defined gain and are left out of that comparison.
    """
    rows = []
    total_value = ZERO
    total_cost = ZERO
    for h in holdings:
        price = prices.get(h.coin_id) or ZERO
        value = h.quantity * price
        cost = h.quantity * h.buy_price
        rows.append((h, price, value, cost))
        total_value += value
        total_cost += cost

    valuations: List[HoldingValuation] = []
    best: Optional[HoldingValuation] = None
    best_gain = ZERO
    for h, price, value, cost in rows:
        hv = HoldingValuation(
            holding=h,
            price=price,
            value=value,
            cost=cost,
            profit_loss=value - cost,
            profit_loss_percent=percent_of(value - cost, cost),
            allocation=percent_of(value, total_value),
        )
        valuations.append(hv)
        gain = price_gain_percent(price, h.buy_price)
        # strict > keeps the first occurrence on ties
        if gain is not None and (best is None or gain > best_gain):
            best = hv
            best_gain = gain

    profit_loss = total_value - total_cost
    return PortfolioValuation(
        holdings=valuations,
        total_value=total_value,
        total_cost=total_cost,
        profit_loss=profit_loss,
        profit_loss_percent=percent_of(profit_loss, total_cost),
        best_performer=best,
        best_performer_gain=best_gain,
    )


EMPTY_VALUATION = value_portfolio([], {})

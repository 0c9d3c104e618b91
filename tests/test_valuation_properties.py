"""Property-based tests for the portfolio valuation engine.

Tests the valuation correctness properties using Hypothesis.
"""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

import pytest
from hypothesis import given, settings, strategies as st, assume

from coinvista.portfolio.models import Holding
from coinvista.portfolio.valuation import (
    EMPTY_VALUATION,
    percent_of,
    price_gain_percent,
    value_portfolio,
)


# Strategies for generating valid test data
positive_quantity_strategy = st.decimals(
    min_value=Decimal("0.001"),
    max_value=Decimal("1000"),
    places=8,
    allow_nan=False,
    allow_infinity=False
)

positive_price_strategy = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("100000"),
    places=2,
    allow_nan=False,
    allow_infinity=False
)

coin_id_strategy = st.sampled_from(["bitcoin", "ethereum", "solana", "cardano", "dogecoin"])


@st.composite
def holding_strategy(draw):
    """Generate a valid holding."""
    return Holding(
        coin_id=draw(coin_id_strategy),
        quantity=draw(positive_quantity_strategy),
        buy_price=draw(positive_price_strategy),
    )


holdings_strategy = st.lists(holding_strategy(), min_size=0, max_size=15)

prices_strategy = st.dictionaries(
    keys=coin_id_strategy,
    values=positive_price_strategy,
    min_size=0,
    max_size=5
)


@given(holdings=holdings_strategy, prices=prices_strategy)
@settings(max_examples=100)
def test_total_value_is_sum_of_quantity_times_price(holdings, prices):
    """
    For any holdings and price map, total value SHALL equal the sum of
    quantity * price, with coins missing from the map priced at 0.
    """
    result = value_portfolio(holdings, prices)

    expected = sum(
        (h.quantity * prices.get(h.coin_id, Decimal("0")) for h in holdings),
        Decimal("0"),
    )
    assert result.total_value == expected
    assert result.total_cost == sum((h.quantity * h.buy_price for h in holdings), Decimal("0"))
    assert result.profit_loss == result.total_value - result.total_cost


@given(holdings=holdings_strategy, prices=prices_strategy)
@settings(max_examples=100)
def test_per_holding_figures_match_aggregate(holdings, prices):
    result = value_portfolio(holdings, prices)

    assert result.asset_count == len(holdings)
    assert [hv.holding for hv in result.holdings] == holdings
    assert sum((hv.value for hv in result.holdings), Decimal("0")) == result.total_value
    for hv in result.holdings:
        assert hv.profit_loss == hv.value - hv.cost
        assert hv.profit_loss_percent == percent_of(hv.profit_loss, hv.cost)


@given(holdings=st.lists(holding_strategy(), min_size=1, max_size=15), prices=prices_strategy)
@settings(max_examples=100)
def test_allocations_sum_to_one_hundred(holdings, prices):
    """
    Allocation percentages over a portfolio with positive total value SHALL
    sum to 100 within display rounding.
    """
    result = value_portfolio(holdings, prices)
    assume(result.total_value > 0)

    total = sum((hv.allocation for hv in result.holdings), Decimal("0"))
    assert abs(total - Decimal("100")) <= Decimal("0.1")


@given(holdings=st.lists(holding_strategy(), min_size=1, max_size=10))
@settings(max_examples=50)
def test_allocations_are_zero_when_nothing_is_priced(holdings):
    result = value_portfolio(holdings, {})

    assert result.total_value == 0
    assert all(hv.allocation == 0 for hv in result.holdings)
    assert result.profit_loss_percent == Decimal("-100")


@given(holdings=holdings_strategy, prices=prices_strategy)
@settings(max_examples=100)
def test_valuation_is_idempotent(holdings, prices):
    assert value_portfolio(holdings, prices) == value_portfolio(holdings, prices)


@given(holdings=st.lists(holding_strategy(), min_size=1, max_size=10), prices=prices_strategy)
@settings(max_examples=100)
def test_best_performer_has_maximum_gain_first_occurrence(holdings, prices):
    result = value_portfolio(holdings, prices)

    gains = [
        price_gain_percent(prices.get(h.coin_id, Decimal("0")), h.buy_price)
        for h in holdings
    ]
    best_gain = max(gains)
    first_index = gains.index(best_gain)

    assert result.best_performer is result.holdings[first_index]
    assert result.best_performer_gain == best_gain


def test_single_holding_scenario():
    holdings = [Holding("bitcoin", Decimal("1"), Decimal("20000"))]

    result = value_portfolio(holdings, {"bitcoin": Decimal("25000")})

    assert result.total_value == Decimal("25000")
    assert result.total_cost == Decimal("20000")
    assert result.profit_loss == Decimal("5000")
    assert result.profit_loss_percent == Decimal("25.00")
    assert result.holdings[0].allocation == Decimal("100")
    assert result.best_performer.holding.coin_id == "bitcoin"
    assert result.best_performer_gain == Decimal("25")


def test_empty_portfolio_is_all_zero():
    result = value_portfolio([], {"bitcoin": Decimal("25000")})

    assert result.total_value == 0
    assert result.total_cost == 0
    assert result.profit_loss == 0
    assert result.profit_loss_percent == 0
    assert result.best_performer is None
    assert result.is_empty
    assert EMPTY_VALUATION == result


def test_same_coin_in_several_lots_is_valued_per_lot():
    holdings = [
        Holding("ethereum", Decimal("2"), Decimal("1000")),
        Holding("ethereum", Decimal("1"), Decimal("3000")),
    ]

    result = value_portfolio(holdings, {"ethereum": Decimal("2000")})

    assert result.total_value == Decimal("6000")
    assert result.total_cost == Decimal("5000")
    assert [hv.profit_loss for hv in result.holdings] == [Decimal("2000"), Decimal("-1000")]
    assert result.holdings[0].allocation == percent_of(Decimal("4000"), Decimal("6000"))
    assert result.best_performer is result.holdings[0]


def test_best_performer_ties_keep_first_occurrence():
    holdings = [
        Holding("bitcoin", Decimal("1"), Decimal("100")),
        Holding("ethereum", Decimal("5"), Decimal("10")),
    ]

    result = value_portfolio(holdings, {"bitcoin": Decimal("150"), "ethereum": Decimal("15")})

    assert result.best_performer.holding.coin_id == "bitcoin"
    assert result.best_performer_gain == Decimal("50")


def test_zero_buy_price_is_excluded_from_best_performer():
    free_lot = SimpleNamespace(coin_id="airdrop", quantity=Decimal("10"), buy_price=Decimal("0"))
    bought = Holding("bitcoin", Decimal("1"), Decimal("30000"))

    result = value_portfolio([free_lot, bought], {"airdrop": Decimal("5"), "bitcoin": Decimal("20000")})

    assert result.best_performer.holding is bought
    assert result.holdings[0].profit_loss_percent == 0
    assert result.total_cost == Decimal("30000")


def test_only_zero_buy_price_lots_have_no_best_performer():
    free_lot = SimpleNamespace(coin_id="airdrop", quantity=Decimal("10"), buy_price=Decimal("0"))

    result = value_portfolio([free_lot], {"airdrop": Decimal("5")})

    assert result.best_performer is None
    assert result.profit_loss_percent == 0
    assert result.total_value == Decimal("50")


@pytest.mark.parametrize(
    "part,whole,expected",
    [
        (Decimal("1"), Decimal("4"), Decimal("25")),
        (Decimal("5"), Decimal("0"), Decimal("0")),
        (Decimal("0"), Decimal("0"), Decimal("0")),
        (Decimal("-2"), Decimal("8"), Decimal("-25")),
    ],
)
def test_percent_of(part, whole, expected):
    assert percent_of(part, whole) == expected

"""Property-based tests for the watchlist."""

from __future__ import annotations

import json
from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from coinvista.portfolio.watchlist import Watchlist
from coinvista.storage import InMemoryStorage, WATCHLIST_KEY


coin_id_strategy = st.sampled_from(["bitcoin", "ethereum", "solana", "cardano", "dogecoin", "ripple"])


@given(initial=st.lists(coin_id_strategy, unique=True, max_size=6), coin_id=coin_id_strategy)
@settings(max_examples=100)
def test_remove_is_idempotent(initial: List[str], coin_id: str):
    """
    Removing a coin id twice SHALL leave the same set as removing it once,
    and removing an absent id SHALL leave the set unchanged.
    """
    storage = InMemoryStorage()
    storage.save(WATCHLIST_KEY, initial)
    watchlist = Watchlist(storage)

    watchlist.remove(coin_id)
    after_first = watchlist.ids()
    changed = watchlist.remove(coin_id)

    assert changed is False
    assert watchlist.ids() == after_first
    assert coin_id not in watchlist
    assert storage.load(WATCHLIST_KEY) == after_first


@given(initial=st.lists(coin_id_strategy, unique=True, max_size=6), coin_id=coin_id_strategy)
@settings(max_examples=100)
def test_toggle_twice_restores_membership(initial: List[str], coin_id: str):
    storage = InMemoryStorage()
    storage.save(WATCHLIST_KEY, initial)
    watchlist = Watchlist(storage)
    was_member = coin_id in watchlist

    assert watchlist.toggle(coin_id) is (not was_member)
    assert watchlist.toggle(coin_id) is was_member
    assert (coin_id in storage.load(WATCHLIST_KEY)) is was_member


@given(ops=st.lists(st.tuples(st.booleans(), coin_id_strategy), max_size=30))
@settings(max_examples=100)
def test_persisted_state_matches_memory_after_any_mutations(ops):
    storage = InMemoryStorage()
    watchlist = Watchlist(storage)

    for add, coin_id in ops:
        if add:
            watchlist.add(coin_id)
        else:
            watchlist.remove(coin_id)

    assert storage.load(WATCHLIST_KEY, []) == watchlist.ids()
    assert len(set(watchlist.ids())) == len(watchlist)
    assert Watchlist(storage).ids() == watchlist.ids()


def test_remove_scenario_persists_single_entry():
    storage = InMemoryStorage()
    storage.save(WATCHLIST_KEY, ["bitcoin", "ethereum"])
    watchlist = Watchlist(storage)

    watchlist.remove("ethereum")

    assert watchlist.ids() == ["bitcoin"]
    assert json.loads(storage.raw(WATCHLIST_KEY)) == ["bitcoin"]


def test_noop_mutations_do_not_write():
    storage = InMemoryStorage()
    watchlist = Watchlist(storage)

    assert watchlist.remove("bitcoin") is False
    assert storage.raw(WATCHLIST_KEY) is None

    watchlist.add("bitcoin")
    assert watchlist.add("bitcoin") is False
    assert storage.load(WATCHLIST_KEY) == ["bitcoin"]


def test_malformed_state_starts_empty():
    storage = InMemoryStorage({WATCHLIST_KEY: '{"bitcoin": true}'})

    assert Watchlist(storage).ids() == []


def test_corrupted_state_starts_empty():
    storage = InMemoryStorage({WATCHLIST_KEY: "[bitcoin"})

    assert Watchlist(storage).ids() == []


def test_loading_drops_duplicates_and_non_strings():
    storage = InMemoryStorage()
    storage.save(WATCHLIST_KEY, ["bitcoin", 3, "ethereum", "bitcoin", "", None])

    assert Watchlist(storage).ids() == ["bitcoin", "ethereum"]


def test_add_requires_coin_id():
    watchlist = Watchlist(InMemoryStorage())
    with pytest.raises(ValueError):
        watchlist.add("")


def test_iteration_preserves_insertion_order():
    watchlist = Watchlist(InMemoryStorage())
    for coin_id in ("solana", "bitcoin", "ethereum"):
        watchlist.add(coin_id)

    assert list(watchlist) == ["solana", "bitcoin", "ethereum"]
    assert watchlist.contains("bitcoin")

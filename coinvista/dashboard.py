"""Dashboard controller.

Owns the user state (watchlist, portfolio book), one polling task per
dataset, and the latest fetched data. Views switch their polling on and
off through ``set_view_active`` so hidden views do not keep fetching.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal, Slot

from coinvista.config import AppSettings
from coinvista.data.models import NEUTRAL_SENTIMENT, Coin, CoinDetail, GlobalStats, PricePoint, SentimentIndex
from coinvista.data.providers import CoinGeckoRestProvider
from coinvista.errors import GatewayError
from coinvista.polling import PollingTask
from coinvista.portfolio.book import PortfolioBook
from coinvista.portfolio.models import Holding
from coinvista.portfolio.valuation import PortfolioValuation, value_portfolio
from coinvista.portfolio.watchlist import Watchlist
from coinvista.storage.storage import IStorageService

logger = logging.getLogger(__name__)

VIEW_MARKETS = "markets"
VIEW_WATCHLIST = "watchlist"
VIEW_PORTFOLIO = "portfolio"

# view -> datasets polled while it is visible
VIEW_TASKS: Dict[str, Tuple[str, ...]] = {
    VIEW_MARKETS: ("markets", "global", "sentiment"),
    VIEW_WATCHLIST: ("watchlist",),
    VIEW_PORTFOLIO: ("portfolio",),
}


class Dashboard(QObject):
    """Wires the market data gateway, the store and the valuation engine.

    Signals:
        marketsUpdated: list[Coin] for the markets table
        globalStatsUpdated: GlobalStats
        sentimentUpdated: SentimentIndex
        watchlistChanged: list[str] of watched coin ids
        watchlistCoinsUpdated: list[Coin] for the watchlist view
        portfolioUpdated: PortfolioValuation, on every holdings or price change
        fetchFailed: (dataset, message)
    """

    marketsUpdated = Signal(object)
    globalStatsUpdated = Signal(object)
    sentimentUpdated = Signal(object)
    watchlistChanged = Signal(object)
    watchlistCoinsUpdated = Signal(object)
    portfolioUpdated = Signal(object)
    fetchFailed = Signal(str, str)

    def __init__(
        self,
        provider: CoinGeckoRestProvider,
        storage: IStorageService,
        settings: Optional[AppSettings] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._provider = provider
        self._settings = settings or AppSettings()
        self.watchlist = Watchlist(storage)
        self.book = PortfolioBook(storage)

        # Latest data; kept across failed fetches
        self.coins: List[Coin] = []
        self.global_stats: Optional[GlobalStats] = None
        self.sentiment: SentimentIndex = NEUTRAL_SENTIMENT
        self.watchlist_coins: List[Coin] = []
        self.prices: Dict[str, Decimal] = {}
        self._active_views: set[str] = set()

        s = self._settings
        self._tasks: Dict[str, PollingTask] = {
            "markets": PollingTask("markets", s.markets_interval_s, self._provider.list_markets, self),
            "global": PollingTask("global", s.global_interval_s, self._provider.get_global_stats, self),
            "sentiment": PollingTask("sentiment", s.sentiment_interval_s, self._provider.get_sentiment, self),
            "watchlist": PollingTask("watchlist", s.watchlist_interval_s, self._fetch_watchlist_coins, self),
            "portfolio": PollingTask("portfolio", s.portfolio_interval_s, self._fetch_portfolio_prices, self),
        }
        self._tasks["markets"].resultReady.connect(self._on_markets)
        self._tasks["global"].resultReady.connect(self._on_global_stats)
        self._tasks["sentiment"].resultReady.connect(self._on_sentiment)
        self._tasks["watchlist"].resultReady.connect(self._on_watchlist_coins)
        self._tasks["portfolio"].resultReady.connect(self._on_prices)
        for name, task in self._tasks.items():
            task.failed.connect(self._failure_forwarder(name))

    # ----- Views -----
    def task(self, name: str) -> PollingTask:
        return self._tasks[name]

    def set_view_active(self, view: str, active: bool) -> None:
        """Start or stop polling for the datasets behind ``view``."""
        if view not in VIEW_TASKS:
            raise ValueError(f"Unknown view '{view}'")
        if active:
            self._active_views.add(view)
        else:
            self._active_views.discard(view)
        for name in VIEW_TASKS[view]:
            self._tasks[name].set_active(active)

    def is_view_active(self, view: str) -> bool:
        return view in self._active_views

    # ----- Watchlist -----
    def toggle_watchlist(self, coin_id: str) -> bool:
        watched = self.watchlist.toggle(coin_id)
        self._watchlist_changed()
        return watched

    def remove_from_watchlist(self, coin_id: str) -> None:
        if self.watchlist.remove(coin_id):
            self._watchlist_changed()

    def _watchlist_changed(self) -> None:
        ids = self.watchlist.ids()
        self.watchlist_coins = [c for c in self.watchlist_coins if c.id in ids]
        self.watchlistChanged.emit(ids)
        self.watchlistCoinsUpdated.emit(list(self.watchlist_coins))
        if self.is_view_active(VIEW_WATCHLIST):
            self._tasks["watchlist"].refresh()

    def _fetch_watchlist_coins(self) -> List[Coin]:
        ids = self.watchlist.ids()
        if not ids:
            return []
        return self._provider.list_markets(ids=ids)

    # ----- Portfolio -----
    def valuation(self) -> PortfolioValuation:
        return value_portfolio(self.book.holdings(), self.prices)

    def add_holding(self, coin_id: str, quantity: str, buy_price: str) -> Holding:
        holding = self.book.add_from_input(coin_id, quantity, buy_price)
        self._holdings_changed()
        return holding

    def remove_holding(self, index: int) -> Holding:
        removed = self.book.remove(index)
        self._holdings_changed()
        return removed

    def _holdings_changed(self) -> None:
        self.portfolioUpdated.emit(self.valuation())
        if self.is_view_active(VIEW_PORTFOLIO):
            self._tasks["portfolio"].refresh()

    def _fetch_portfolio_prices(self) -> Dict[str, Decimal]:
        ids = self.book.coin_ids()
        if not ids:
            return {}
        return self._provider.get_spot_prices(ids)

    # ----- Coin detail -----
    def open_coin(self, coin_id: str, range_days: int = 7) -> Tuple[CoinDetail, List[PricePoint]]:
        """Fetch detail and price history for one coin (no polling).

        Failures are reported through ``fetchFailed("coin", msg)`` and re-raised.
        """
        try:
            detail = self._provider.get_coin_detail(coin_id)
            history = self._provider.get_price_history(coin_id, range_days)
        except GatewayError as e:
            logger.warning(f"Fetch 'coin' failed for {coin_id}: {e}")
            self.fetchFailed.emit("coin", str(e))
            raise
        return detail, history

    # ----- Results -----
    @Slot(object)
    def _on_markets(self, coins: List[Coin]) -> None:
        self.coins = coins
        self.marketsUpdated.emit(coins)

    @Slot(object)
    def _on_global_stats(self, stats: GlobalStats) -> None:
        self.global_stats = stats
        self.globalStatsUpdated.emit(stats)

    @Slot(object)
    def _on_sentiment(self, sentiment: SentimentIndex) -> None:
        self.sentiment = sentiment
        self.sentimentUpdated.emit(sentiment)

    @Slot(object)
    def _on_watchlist_coins(self, coins: List[Coin]) -> None:
        self.watchlist_coins = coins
        self.watchlistCoinsUpdated.emit(coins)

    @Slot(object)
    def _on_prices(self, prices: Dict[str, Decimal]) -> None:
        self.prices = prices
        self.portfolioUpdated.emit(self.valuation())

    def _failure_forwarder(self, dataset: str):
        def forward(message: str) -> None:
            self.fetchFailed.emit(dataset, message)
        return forward

    # ----- Lifecycle -----
    def shutdown(self) -> None:
        for task in self._tasks.values():
            task.stop()
        self._active_views.clear()
        try:
            self._provider.close()
        except Exception as e:
            logger.error(f"Failed to close market data client: {e}")

from __future__ import annotations

import logging
import signal
import sys

from PySide6.QtCore import QCoreApplication, QTimer

from coinvista.config import load_settings
from coinvista.dashboard import VIEW_MARKETS, VIEW_PORTFOLIO, VIEW_WATCHLIST, Dashboard
from coinvista.data.providers import CoinGeckoRestProvider
from coinvista.portfolio.valuation import PortfolioValuation
from coinvista.storage.storage import JsonFileStorage
from coinvista.ui.formatting import format_change, format_large_usd, format_price
from coinvista.util.env import default_data_dir, env_str, fix_ssl_env

logger = logging.getLogger(__name__)


def _log_markets(coins) -> None:
    top = ", ".join(f"{c.symbol.upper()} {format_price(c.current_price)}" for c in coins[:5])
    logger.info(f"Markets: {len(coins)} coins; top: {top}")


def _log_portfolio(v: PortfolioValuation) -> None:
    logger.info(
        f"Portfolio: {v.asset_count} holdings, value {format_large_usd(v.total_value)}, "
        f"cost {format_large_usd(v.total_cost)}, P/L {format_change(v.profit_loss_percent)}"
    )


def main() -> int:
    logging.basicConfig(
        level=(env_str("COINVISTA_LOG_LEVEL", "INFO") or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Fix potential invalid SSL env vars before the HTTP client loads certificates
    fix_ssl_env()

    app = QCoreApplication(sys.argv)
    storage = JsonFileStorage(default_data_dir())
    settings = load_settings(storage)
    provider = CoinGeckoRestProvider(
        timeout_s=settings.timeout_s,
        vs_currency=settings.vs_currency,
        page_size=settings.markets_page_size,
        use_os_trust_store=settings.use_os_trust_store,
    )
    dashboard = Dashboard(provider, storage, settings)
    dashboard.marketsUpdated.connect(_log_markets)
    dashboard.globalStatsUpdated.connect(
        lambda s: logger.info(
            f"Global: cap {format_large_usd(s.total_market_cap)} ({format_change(s.market_cap_change_24h)}), "
            f"BTC dominance {s.btc_dominance:.1f}%"
        )
    )
    dashboard.sentimentUpdated.connect(lambda s: logger.info(f"Sentiment: {s.value} ({s.classification})"))
    dashboard.portfolioUpdated.connect(_log_portfolio)
    dashboard.fetchFailed.connect(lambda name, msg: logger.error(f"Fetch error ({name}): {msg}"))
    app.aboutToQuit.connect(dashboard.shutdown)

    # Ctrl+C quits; the idle timer lets Python see the signal while Qt runs
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    idle = QTimer()
    idle.start(500)
    idle.timeout.connect(lambda: None)

    for view in (VIEW_MARKETS, VIEW_WATCHLIST, VIEW_PORTFOLIO):
        dashboard.set_view_active(view, True)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())

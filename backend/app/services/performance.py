"""
Cache-aware candle and performance lookups.

Stored data is reused while it is up to date; otherwise it is fetched
from the market data client, written back and returned.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from app.schemas.domain import CandleBar, PerformanceSnapshot
from app.schemas.enums import TickerType
from app.services.store import Store
from app.services.yahoo import MarketDataError, YahooFinanceClient
from app.utils.market import compute_perf, is_upto_date

logger = logging.getLogger(__name__)


def fetch_candles(
    store: Store,
    client: YahooFinanceClient,
    ticker: str,
    now: Optional[datetime] = None,
) -> List[CandleBar]:
    candles = store.get_candles(ticker, now=now)
    if candles and candles[-1].last_updated and is_upto_date(candles[-1].last_updated, now):
        logger.debug("Candles for %s loaded from store (%d)", ticker, len(candles))
        return candles

    fetched = client.fetch_daily_candles(ticker)
    store.save_candles(ticker, fetched)
    logger.debug("Stored %d fetched candles for %s", len(fetched), ticker)
    return store.get_candles(ticker, now=now)


def fetch_stock_perf(
    store: Store,
    client: YahooFinanceClient,
    ticker: str,
    now: Optional[datetime] = None,
) -> PerformanceSnapshot:
    cached = store.get_performance(ticker, TickerType.STOCK, now=now)
    if cached is not None:
        return cached

    candles = fetch_candles(store, client, ticker, now=now)
    if not candles:
        raise MarketDataError(f"No candles available for {ticker}")

    perf = PerformanceSnapshot.from_perf_map(
        ticker,
        TickerType.STOCK,
        compute_perf(candles),
        last_updated=now or datetime.now(timezone.utc),
    )
    store.save_performances([perf])
    return perf

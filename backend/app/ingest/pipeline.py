"""
Ingestion pipeline: watchlist tickers -> stock info, candles and
performance in the store.

For every ticker:
- stock reference data, reused from the store unless refreshing
- daily candles and trailing performance, reused while up to date
- optionally, the last few days of intraday candles
Change events are published once the writes for a ticker are done.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from app.core.config import settings
from app.realtime.publish import (
    publish_candles_update,
    publish_performance_update,
    publish_stocks_update,
)
from app.schemas.domain import PerformanceSnapshot, StockInfo
from app.schemas.enums import DataSource
from app.services.performance import fetch_stock_perf
from app.services.store import Store
from app.services.yahoo import YahooFinanceClient

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    baseline: PerformanceSnapshot
    stocks: List[StockInfo] = field(default_factory=list)
    performances: List[PerformanceSnapshot] = field(default_factory=list)


def _stock_info(
    store: Store,
    client: YahooFinanceClient,
    ticker: str,
    refresh: bool,
) -> StockInfo:
    # The client only produces Yahoo rows
    if not refresh:
        cached = store.get_stock(ticker, DataSource.YAHOO)
        if cached is not None:
            return cached

    stock = client.fetch_stock_info(ticker)
    store.add_stocks([stock])
    return stock


async def run_ingest(
    store: Store,
    client: YahooFinanceClient,
    tickers: Sequence[str],
    refresh: bool = False,
    intraday: bool = False,
) -> IngestResult:
    """
    Load every ticker into the store.

    Args:
        store: Target store
        client: Market data client
        tickers: Upper-case tickers to load
        refresh: Re-fetch stock info even when stored
        intraday: Also store recent intraday candles
    """
    baseline = fetch_stock_perf(store, client, settings.BASE_TICKER)
    logger.info("Fetched baseline: %s", baseline)

    result = IngestResult(baseline=baseline)
    total = len(tickers)
    for i, ticker in enumerate(tickers, start=1):
        logger.info("[%d/%d] %s info...", i, total, ticker)
        stock = _stock_info(store, client, ticker, refresh)
        result.stocks.append(stock)

        logger.info("[%d/%d] %s performance...", i, total, ticker)
        perf = fetch_stock_perf(store, client, ticker)
        result.performances.append(perf)

        if intraday:
            store.save_intraday_candles(ticker, client.fetch_intraday_candles(ticker))

        candles = store.get_candles(ticker)
        await publish_candles_update(
            ticker,
            len(candles),
            candles[-1].timestamp if candles else None,
        )

    await publish_stocks_update([s.ticker for s in result.stocks], DataSource.YAHOO.value)
    await publish_performance_update([baseline, *result.performances])

    logger.info("Finished processing %d tickers", len(result.stocks))
    return result

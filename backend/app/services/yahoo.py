"""
Yahoo Finance client for stock reference data and price candles.
"""

import logging
from datetime import date, datetime, timezone
from typing import List

import yfinance as yf

from app.schemas.domain import CandleBar, Group, StockInfo
from app.schemas.enums import DataSource

logger = logging.getLogger(__name__)

# Yahoo has no sector/industry pages we link to
NO_URL = "#"


class MarketDataError(RuntimeError):
    """Upstream market data is missing or unusable."""


def exchange_code(exchange: str) -> str:
    """Map Yahoo's exchange display name to the short code we store."""
    if exchange == "NYSE":
        return "NYSE"
    if exchange == "NYSE American":
        return "ARCA"
    if exchange.startswith("Nasdaq"):
        return "NASDAQ"
    if exchange.startswith("OTC"):
        return "OTC"
    raise MarketDataError(f"Unknown exchange: {exchange!r}")


def _utc(ts) -> datetime:
    dt = ts.to_pydatetime() if hasattr(ts, "to_pydatetime") else ts
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class YahooFinanceClient:
    """Thin wrapper over yfinance returning domain types."""

    def fetch_stock_info(self, ticker: str) -> StockInfo:
        ticker = ticker.upper()
        try:
            info = yf.Ticker(ticker).info or {}
        except Exception as e:
            raise MarketDataError(f"Failed to fetch ticker info for {ticker}") from e

        exchange = info.get("fullExchangeName") or info.get("exchangeName")
        if not exchange:
            raise MarketDataError(f"Failed to get exchange {ticker}")
        sector = info.get("sector")
        if not sector:
            raise MarketDataError(f"Failed to get sector {ticker}")
        industry = info.get("industry")
        if not industry:
            raise MarketDataError(f"Failed to get industry {ticker}")

        return StockInfo(
            source=DataSource.YAHOO,
            ticker=ticker,
            exchange=exchange_code(exchange),
            sector=Group(name=sector, url=NO_URL),
            industry=Group(name=industry, url=NO_URL),
            last_update=date.today(),
        )

    def fetch_daily_candles(self, ticker: str, period: str = "2y") -> List[CandleBar]:
        return self._history(ticker, period=period, interval="1d")

    def fetch_intraday_candles(
        self,
        ticker: str,
        period: str = "5d",
        interval: str = "5m",
    ) -> List[CandleBar]:
        return self._history(ticker, period=period, interval=interval)

    def _history(self, ticker: str, period: str, interval: str) -> List[CandleBar]:
        try:
            bars = (
                yf.Ticker(ticker)
                .history(period=period, interval=interval, auto_adjust=False, actions=False)
                .dropna(subset=["Close"])
            )
        except Exception as e:
            raise MarketDataError(f"Failed to fetch {interval} candles for {ticker}") from e

        fetched_at = datetime.now(timezone.utc)
        candles = [
            CandleBar(
                timestamp=_utc(ts),
                open=float(row["Open"]),
                high=float(row["High"]),
                low=float(row["Low"]),
                close=float(row["Close"]),
                volume=int(row["Volume"]) if row["Volume"] == row["Volume"] else 0,  # NaN check
                last_updated=fetched_at,
            )
            for ts, row in bars.iterrows()
        ]
        logger.debug("Fetched %d %s candles for %s", len(candles), interval, ticker)
        return candles

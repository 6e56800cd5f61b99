from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.config import settings
from app.core.db import create_db_engine
from app.core.migrations import run_migrations
from app.schemas.domain import CandleBar, Group, StockInfo
from app.schemas.enums import DataSource
from app.services.store import Store
from app.services.yahoo import MarketDataError


def make_stock(ticker, sector="Technology", industry="Software", source=DataSource.YAHOO,
               exchange="NASDAQ", last_update=None):
    return StockInfo(
        source=source,
        ticker=ticker,
        exchange=exchange,
        sector=Group(name=sector, url="#"),
        industry=Group(name=industry, url="#"),
        last_update=last_update or date.today(),
    )


def daily_candles(end, days, start_close=100.0, step=1.0, last_updated=None):
    """`days` consecutive daily bars ending at `end`, close rising by `step`."""
    bars = []
    for i in range(days):
        ts = end - timedelta(days=days - 1 - i)
        close = start_close + i * step
        bars.append(
            CandleBar(
                timestamp=ts,
                open=close,
                high=close + 1,
                low=close - 1,
                close=close,
                volume=1000 + i,
                last_updated=last_updated,
            )
        )
    return bars


class FakeYahooClient:
    """In-memory stand-in for YahooFinanceClient."""

    def __init__(self, stocks=None, candles=None, intraday=None):
        self.stocks = {s.ticker: s for s in (stocks or [])}
        self.candles = candles or {}
        self.intraday = intraday or {}
        self.calls = []

    def fetch_stock_info(self, ticker):
        self.calls.append(("info", ticker))
        if ticker not in self.stocks:
            raise MarketDataError(f"Failed to get exchange {ticker}")
        return self.stocks[ticker]

    def fetch_daily_candles(self, ticker, period="2y"):
        self.calls.append(("daily", ticker))
        return list(self.candles.get(ticker, []))

    def fetch_intraday_candles(self, ticker, period="5d", interval="5m"):
        self.calls.append(("intraday", ticker))
        return list(self.intraday.get(ticker, []))


@pytest.fixture(autouse=True)
def no_redis(monkeypatch):
    monkeypatch.setattr(settings, "REDIS_URL", "")


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'test.sqlite'}"


@pytest.fixture
def migrated_url(database_url):
    run_migrations(database_url)
    return database_url


@pytest.fixture
def store(migrated_url):
    store = Store(create_db_engine(migrated_url))
    yield store
    store.engine.dispose()


@pytest.fixture
def fake_client():
    now = datetime.now(timezone.utc)
    tickers = ["SPY", "AAPL", "MSFT"]
    return FakeYahooClient(
        stocks=[make_stock("AAPL", industry="Consumer Electronics"), make_stock("MSFT")],
        candles={t: daily_candles(now - timedelta(hours=1), 400, last_updated=now) for t in tickers},
        intraday={"AAPL": [
            CandleBar(timestamp=now - timedelta(minutes=5 * i), open=1, high=2, low=0.5, close=1.5, volume=10)
            for i in range(3)
        ]},
    )

from datetime import datetime, timezone

from app.schemas.domain import PerformanceSnapshot
from app.schemas.enums import TickerType
from app.services.summary import build_report, rs_map, summarize

from conftest import make_stock


def snap(ticker, ticker_type, value):
    return PerformanceSnapshot(
        ticker=ticker,
        ticker_type=ticker_type,
        perf_1m=value, perf_3m=value, perf_6m=value, perf_1y=value,
        last_updated=datetime(2026, 10, 16, 21, tzinfo=timezone.utc),
    )


STOCKS = [
    make_stock("AAPL", "Technology", "Consumer Electronics"),
    make_stock("XOM", "Energy", "Oil Refining", exchange="NYSE"),
    make_stock("MSFT", "Technology", "Software"),
    make_stock("ORCL", "Technology", "Software", exchange="NYSE"),
]


def test_summarize_groups_largest_first():
    summary = summarize(STOCKS)

    assert summary.size == 4
    assert [s.name for s in summary.sectors] == ["Technology", "Energy"]

    tech = summary.sectors[0]
    assert tech.size == 3
    assert [i.name for i in tech.industries] == ["Software", "Consumer Electronics"]
    assert [(t.exchange, t.ticker) for t in tech.industries[0].tickers] == [
        ("NASDAQ", "MSFT"), ("NYSE", "ORCL"),
    ]


def test_summarize_empty():
    summary = summarize([])
    assert summary.size == 0
    assert summary.sectors == []


def test_rs_map_rounds():
    base = snap("SPY", TickerType.STOCK, 0.0)
    assert rs_map([snap("A", TickerType.STOCK, 10.0), snap("B", TickerType.STOCK, 3.333)], base) == {
        "A": 1.1,
        "B": 1.03,
    }


def test_build_report():
    base = snap("SPY", TickerType.STOCK, 10.0)
    report = build_report(
        summarize(STOCKS),
        [snap("Technology", TickerType.SECTOR, 21.0)],
        [snap("Software", TickerType.INDUSTRY, 10.0)],
        [snap("MSFT", TickerType.STOCK, 0.0)],
        base,
    )

    assert report.benchmark == "SPY"
    assert report.summary.size == 4
    assert report.sectorRs == {"Technology": 1.1}
    assert report.industryRs == {"Software": 1.0}
    assert report.stockRs == {"MSFT": 0.91}

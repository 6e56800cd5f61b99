from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from app.schemas.domain import CandleBar, PerformanceSnapshot
from app.schemas.enums import TickerType
from app.utils.market import (
    compute_perf,
    compute_rs,
    is_market_open,
    is_upto_date,
    last_market_close,
    months_before,
    normalize,
    parse_percentage,
)

NY = ZoneInfo("America/New_York")


def ny(*args):
    return datetime(*args, tzinfo=NY)


class TestMarketSession:
    def test_open_hours(self):
        assert is_market_open(ny(2026, 10, 14, 9, 30))
        assert is_market_open(ny(2026, 10, 14, 15, 59))
        assert not is_market_open(ny(2026, 10, 14, 9, 29))
        assert not is_market_open(ny(2026, 10, 14, 16, 0))
        assert not is_market_open(ny(2026, 10, 17, 12, 0))  # Saturday

    def test_last_close(self):
        assert last_market_close(ny(2026, 10, 14, 17, 0)) == ny(2026, 10, 14, 16, 0)
        assert last_market_close(ny(2026, 10, 14, 8, 0)) == ny(2026, 10, 13, 16, 0)
        # Weekend and Monday morning fall back to Friday
        assert last_market_close(ny(2026, 10, 17, 10, 0)) == ny(2026, 10, 16, 16, 0)
        assert last_market_close(ny(2026, 10, 19, 8, 0)) == ny(2026, 10, 16, 16, 0)

    def test_nothing_is_current_while_open(self):
        now = ny(2026, 10, 14, 12, 0)
        assert not is_upto_date(now, now)

    @pytest.mark.parametrize("written, now, expected", [
        (ny(2026, 10, 14, 16, 30), ny(2026, 10, 14, 17, 0), True),
        (ny(2026, 10, 14, 15, 59), ny(2026, 10, 14, 17, 0), False),
        (ny(2026, 10, 16, 16, 0), ny(2026, 10, 17, 10, 0), True),
        (ny(2026, 10, 16, 15, 0), ny(2026, 10, 17, 10, 0), False),
        (ny(2026, 10, 16, 17, 0), ny(2026, 10, 19, 8, 0), True),
        (ny(2026, 10, 13, 17, 0), ny(2026, 10, 14, 8, 0), True),
        (ny(2026, 10, 13, 17, 0), ny(2026, 10, 14, 17, 0), False),
    ])
    def test_upto_date(self, written, now, expected):
        assert is_upto_date(written, now) is expected

    def test_upto_date_across_timezones(self):
        # 16:30 EDT
        written = datetime(2026, 10, 16, 20, 30, tzinfo=timezone.utc)
        assert is_upto_date(written, ny(2026, 10, 17, 10, 0))


class TestParsing:
    @pytest.mark.parametrize("raw, expected", [
        ("  consumer   NON-durables／retail ", "Consumer Non-durables/Retail"),
        ("electronic\ttechnology", "Electronic Technology"),
        ("REAL ESTATE INVESTMENT TRUSTS", "Real Estate Investment Trusts"),
        ("Oil ⁄ gas", "Oil / Gas"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("+12.5%", 12.5),
        ("−3.40 %", -3.4),
        ("-0.5%", -0.5),
        ("1,234.5", 1234.5),
        ("0", 0.0),
    ])
    def test_parse_percentage(self, raw, expected):
        assert parse_percentage(raw) == pytest.approx(expected)

    def test_parse_percentage_rejects_garbage(self):
        with pytest.raises(ValueError, match="Failed to parse percentage"):
            parse_percentage("n/a")


class TestPerformanceMath:
    @pytest.mark.parametrize("dt, months, expected", [
        (datetime(2026, 10, 16), 1, datetime(2026, 9, 16)),
        (datetime(2026, 10, 16), 12, datetime(2025, 10, 16)),
        (datetime(2026, 1, 15), 1, datetime(2025, 12, 15)),
        (datetime(2026, 3, 31), 1, datetime(2026, 2, 28)),
        (datetime(2024, 3, 31), 1, datetime(2024, 2, 29)),
        (datetime(2026, 8, 31), 6, datetime(2026, 2, 28)),
    ])
    def test_months_before(self, dt, months, expected):
        assert months_before(dt, months) == expected

    def test_compute_perf(self):
        def bar(y, m, d, close):
            return CandleBar(
                timestamp=datetime(y, m, d, tzinfo=timezone.utc),
                open=close, high=close, low=close, close=close, volume=0,
            )

        candles = [
            bar(2025, 10, 16, 50.0),
            bar(2026, 4, 16, 80.0),
            bar(2026, 7, 16, 90.0),
            bar(2026, 9, 15, 95.0),
            bar(2026, 10, 16, 100.0),
        ]
        perf = compute_perf(candles)

        assert perf["1M"] == pytest.approx(5 / 95 * 100)
        assert perf["3M"] == pytest.approx(10 / 90 * 100)
        assert perf["6M"] == pytest.approx(25.0)
        assert perf["1Y"] == pytest.approx(100.0)

    def test_compute_perf_empty(self):
        assert compute_perf([]) == {}

    def test_compute_perf_skips_zero_close(self):
        def bar(m, d, close):
            return CandleBar(
                timestamp=datetime(2026, m, d, tzinfo=timezone.utc),
                open=close, high=close, low=close, close=close, volume=0,
            )

        # The zero bar sits exactly one month back; the next nearest is used
        perf = compute_perf([bar(1, 1, 0.0), bar(1, 5, 50.0), bar(2, 1, 100.0)])
        assert perf["1M"] == pytest.approx(100.0)

        assert compute_perf([bar(1, 1, 0.0), bar(2, 1, 0.0)]) == {
            "1M": 0.0, "3M": 0.0, "6M": 0.0, "1Y": 0.0,
        }

    def test_compute_rs(self):
        def snap(value):
            return PerformanceSnapshot(
                ticker="X", ticker_type=TickerType.STOCK,
                perf_1m=value, perf_3m=value, perf_6m=value, perf_1y=value,
                last_updated=datetime(2026, 10, 16, tzinfo=timezone.utc),
            )

        assert compute_rs(snap(10.0), snap(0.0)) == pytest.approx(1.1)
        assert compute_rs(snap(10.0), snap(10.0)) == pytest.approx(1.0)
        assert compute_rs(snap(0.0), snap(10.0)) == pytest.approx(1 / 1.1)

    def test_compute_rs_weights(self):
        perf = PerformanceSnapshot(
            ticker="X", ticker_type=TickerType.STOCK,
            perf_1m=10.0, perf_3m=0.0, perf_6m=0.0, perf_1y=0.0,
            last_updated=datetime(2026, 10, 16, tzinfo=timezone.utc),
        )
        base = perf.model_copy(update={"perf_1m": 0.0, "perf_1y": 10.0})
        assert compute_rs(perf, base) == pytest.approx(1.03 / 1.01)

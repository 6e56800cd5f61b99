"""
Market calculations: freshness against the trading session, name and
percentage parsing, trailing performance and relative strength.
"""

import calendar
from datetime import datetime, timedelta
from typing import Dict, Optional, Sequence
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.schemas.domain import CandleBar, PerformanceSnapshot

# Unicode look-alikes of '/' seen in scraped group names
SLASH_LOOKALIKES = ("／", "⁄", "∕", "⧸")

# Months back for each trailing-return period
PERF_PERIODS = {"1M": 1, "3M": 3, "6M": 6, "1Y": 12}

# Relative strength weights per period
RS_WEIGHTS = {"perf_1m": 0.3, "perf_3m": 0.4, "perf_6m": 0.2, "perf_1y": 0.1}


def market_tz() -> ZoneInfo:
    return ZoneInfo(settings.MARKET_TIMEZONE)


def _is_weekend(d) -> bool:
    return d.weekday() >= 5


def is_market_open(now: Optional[datetime] = None) -> bool:
    """True on a weekday between the configured open (inclusive) and close (exclusive)."""
    tz = market_tz()
    now = (now or datetime.now(tz)).astimezone(tz)
    if _is_weekend(now):
        return False
    return settings.MARKET_OPEN <= now.time() < settings.MARKET_CLOSE


def last_market_close(now: Optional[datetime] = None) -> datetime:
    """Most recent weekday session close at or before `now`. No holiday calendar."""
    tz = market_tz()
    now = (now or datetime.now(tz)).astimezone(tz)
    candidate = now.date()
    while True:
        if not _is_weekend(candidate):
            close_dt = datetime.combine(candidate, settings.MARKET_CLOSE, tzinfo=tz)
            if close_dt <= now:
                return close_dt
        candidate -= timedelta(days=1)


def is_upto_date(time: datetime, now: Optional[datetime] = None) -> bool:
    """
    Whether data written at `time` still reflects the market.

    Nothing is current while the market is open; otherwise data is current
    when it was written after the last close.
    """
    if is_market_open(now):
        return False
    return time >= last_market_close(now)


def normalize(name: str) -> str:
    """
    Canonical form of a sector/industry name.

    "  consumer   NON-durables／retail " -> "Consumer Non-durables/Retail"
    """
    for ch in SLASH_LOOKALIKES:
        name = name.replace(ch, "/")
    name = "".join(" " if ch.isspace() else ch for ch in name)
    name = " ".join(part for part in name.split(" ") if part)

    result = []
    capitalize_next = True
    for ch in name:
        if ch in (" ", "/"):
            result.append(ch)
            capitalize_next = True
        elif capitalize_next:
            result.append(ch.upper())
            capitalize_next = False
        else:
            result.append(ch.lower())
    return "".join(result)


def parse_percentage(text: str) -> float:
    """Parse strings like "+12.5%", "−3.40 %" or "1,234.5" into a float."""
    normalized = (
        text.strip()
        .replace("−", "-")  # mathematical minus
        .replace("+", "")
        .replace("%", "")
        .replace(",", "")
    )
    try:
        return float(normalized)
    except ValueError:
        raise ValueError(f"Failed to parse percentage: {text!r}") from None


def months_before(dt: datetime, months: int) -> datetime:
    """Same wall time `months` calendar months earlier, clamping the day."""
    total = dt.year * 12 + (dt.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def compute_perf(candles: Sequence[CandleBar]) -> Dict[str, float]:
    """
    Trailing returns in percent, keyed "1M", "3M", "6M", "1Y".

    Each return compares the latest close with the close of the candle
    nearest to the same time N months earlier. Candles must be ascending.
    Bars with a non-positive close are never used as the reference; a
    period with no usable reference is 0.0.
    """
    if not candles:
        return {}

    latest = candles[-1]
    references = [c for c in candles if c.close > 0]

    def closest_close(months: int) -> float:
        if not references:
            return 0.0
        target = months_before(latest.timestamp, months)
        nearest = min(references, key=lambda c: abs((c.timestamp - target).total_seconds()))
        return (latest.close - nearest.close) / nearest.close * 100.0

    return {key: closest_close(months) for key, months in PERF_PERIODS.items()}


def _rs_multiplier(perf: PerformanceSnapshot) -> float:
    return 1.0 + sum(getattr(perf, field) * w for field, w in RS_WEIGHTS.items()) / 100.0


def compute_rs(perf: PerformanceSnapshot, base: PerformanceSnapshot) -> float:
    """Relative strength of `perf` against the benchmark `base` (1.0 = in line)."""
    return _rs_multiplier(perf) / _rs_multiplier(base)

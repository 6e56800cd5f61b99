"""
Pydantic schemas for stock-themes domain models.

These are the types exchanged between the store, the ingestion pipeline
and the API. ORM rows never leave the store.
"""

from datetime import date, datetime, timezone
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from .enums import DataSource, TickerType

# Keys of the trailing-return columns, in column order
PERF_KEYS = ("1M", "3M", "6M", "1Y")


def _to_utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class Group(BaseModel):
    """A sector or industry classification with its reference page."""

    name: str = Field(..., min_length=1)
    url: str = Field(..., description="Reference URL, '#' when unknown")


class StockInfo(BaseModel):
    """Reference data for a ticker as reported by one data source."""

    source: DataSource = Field(DataSource.TRADINGVIEW, description="Data provider")
    ticker: str = Field(..., min_length=1)
    exchange: str = Field(..., min_length=1)
    sector: Group
    industry: Group
    last_update: date

    @field_validator("ticker")
    @classmethod
    def upper_ticker(cls, v: str) -> str:
        return v.strip().upper()


class PerformanceSnapshot(BaseModel):
    """Trailing returns in percent for a sector, industry or stock."""

    ticker: str = Field(..., min_length=1)
    ticker_type: TickerType
    perf_1m: float
    perf_3m: float
    perf_6m: float
    perf_1y: float
    extra_info: Dict[str, float] = Field(default_factory=dict)
    last_updated: datetime

    @field_validator("last_updated")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return _to_utc(v)

    @classmethod
    def from_perf_map(
        cls,
        ticker: str,
        ticker_type: TickerType,
        perf_map: Dict[str, float],
        last_updated: Optional[datetime] = None,
    ) -> "PerformanceSnapshot":
        """
        Build a snapshot from a {"1M": .., "3M": .., "6M": .., "1Y": ..} mapping.

        Missing periods count as 0.0; any other keys are kept in extra_info.
        """
        return cls(
            ticker=ticker,
            ticker_type=ticker_type,
            perf_1m=perf_map.get("1M", 0.0),
            perf_3m=perf_map.get("3M", 0.0),
            perf_6m=perf_map.get("6M", 0.0),
            perf_1y=perf_map.get("1Y", 0.0),
            extra_info={k: v for k, v in perf_map.items() if k not in PERF_KEYS},
            last_updated=last_updated or datetime.now(timezone.utc),
        )

    def __str__(self) -> str:
        return (
            f"{self.ticker} [{self.ticker_type.value}] 1M={self.perf_1m:.2f}% "
            f"3M={self.perf_3m:.2f}% 6M={self.perf_6m:.2f}% 1Y={self.perf_1y:.2f}%"
        )


class CandleBar(BaseModel):
    """One OHLCV bar."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: int = Field(..., ge=0)
    last_updated: Optional[datetime] = None

    @field_validator("timestamp", "last_updated")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_utc(v) if v is not None else None


class TickerRef(BaseModel):
    exchange: str
    ticker: str


class SummaryIndustry(BaseModel):
    name: str
    url: str
    size: int = 0
    tickers: List[TickerRef] = Field(default_factory=list)


class SummarySector(BaseModel):
    name: str
    url: str
    size: int = 0
    industries: List[SummaryIndustry] = Field(default_factory=list)


class Summary(BaseModel):
    """Stocks grouped by sector, then industry, largest groups first."""

    size: int = 0
    sectors: List[SummarySector] = Field(default_factory=list)


class SummaryReport(BaseModel):
    """Summary plus relative strength of each group and stock against the benchmark."""

    benchmark: str
    summary: Summary
    sectorRs: Dict[str, float] = Field(default_factory=dict)
    industryRs: Dict[str, float] = Field(default_factory=dict)
    stockRs: Dict[str, float] = Field(default_factory=dict)

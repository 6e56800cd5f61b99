"""
Domain and response schemas.
"""
from .enums import TickerType, DataSource
from .domain import (
    PERF_KEYS,
    Group,
    StockInfo,
    PerformanceSnapshot,
    CandleBar,
    TickerRef,
    SummaryIndustry,
    SummarySector,
    Summary,
    SummaryReport,
)
from .responses import (
    ApiResponse,
    ErrorResponse,
)

__all__ = [
    "TickerType",
    "DataSource",
    "PERF_KEYS",
    "Group",
    "StockInfo",
    "PerformanceSnapshot",
    "CandleBar",
    "TickerRef",
    "SummaryIndustry",
    "SummarySector",
    "Summary",
    "SummaryReport",
    "ApiResponse",
    "ErrorResponse",
]

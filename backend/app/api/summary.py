"""
Summary API router.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from app.core.config import settings
from app.schemas.domain import SummaryReport
from app.schemas.enums import DataSource, TickerType
from app.schemas.responses import ApiResponse
from app.services.store import Store, get_store
from app.services.summary import build_report, summarize

router = APIRouter()


@router.get("", response_model=ApiResponse[SummaryReport])
def get_summary(
    source: Optional[DataSource] = Query(None),
    store: Store = Depends(get_store),
):
    """
    Stored stocks grouped by sector and industry, with the relative
    strength of each sector, industry and stock against the benchmark.
    """
    base = store.get_performance(settings.BASE_TICKER, TickerType.STOCK)
    if base is None:
        raise HTTPException(
            status_code=404,
            detail=f"No current performance for benchmark {settings.BASE_TICKER}",
        )

    stocks = store.list_stocks(source)
    tickers = {s.ticker for s in stocks}
    stock_perfs = [
        p for p in store.get_performances_by_type(TickerType.STOCK)
        if p.ticker in tickers
    ]

    report = build_report(
        summarize(stocks),
        store.get_performances_by_type(TickerType.SECTOR),
        store.get_performances_by_type(TickerType.INDUSTRY),
        stock_perfs,
        base,
    )
    return ApiResponse.ok(report)

"""
Performance API router.

Only records that are up to date with the last market close are served.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from app.schemas.domain import PerformanceSnapshot
from app.schemas.enums import TickerType
from app.schemas.responses import ApiResponse
from app.services.store import Store, get_store

router = APIRouter()


@router.get("", response_model=ApiResponse[List[PerformanceSnapshot]])
def get_performances(
    ticker_type: Optional[TickerType] = Query(None, alias="tickerType"),
    store: Store = Depends(get_store),
):
    """Get current performance records, optionally of one ticker type."""
    if ticker_type is None:
        perfs = store.get_all_performances()
    else:
        perfs = store.get_performances_by_type(ticker_type)
    return ApiResponse.ok(perfs)


@router.get("/{ticker_type}/{ticker}", response_model=ApiResponse[PerformanceSnapshot])
def get_performance(
    ticker_type: TickerType,
    ticker: str,
    store: Store = Depends(get_store),
):
    """Get the current performance record of one sector, industry or stock."""
    # Stock tickers are stored upper-case; group names keep their case
    if ticker_type == TickerType.STOCK:
        ticker = ticker.upper()
    perf = store.get_performance(ticker, ticker_type)
    if perf is None:
        raise HTTPException(
            status_code=404,
            detail=f"No current performance for {ticker_type.value} {ticker}",
        )
    return ApiResponse.ok(perf)

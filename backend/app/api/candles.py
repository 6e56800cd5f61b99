"""
Candles API router.
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from app.schemas.domain import CandleBar
from app.schemas.responses import ApiResponse
from app.services.store import Store, get_store

router = APIRouter()


@router.get("/{ticker}", response_model=ApiResponse[List[CandleBar]])
def get_daily_candles(
    ticker: str,
    lookback_days: Optional[int] = Query(None, alias="lookbackDays", ge=1),
    store: Store = Depends(get_store),
):
    """Get daily candles for a ticker, oldest first."""
    return ApiResponse.ok(store.get_candles(ticker.upper(), lookback_days))


@router.get("/{ticker}/intraday", response_model=ApiResponse[List[CandleBar]])
def get_intraday_candles(
    ticker: str,
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    store: Store = Depends(get_store),
):
    """Get intraday candles for a ticker within [start, end], oldest first."""
    return ApiResponse.ok(store.get_intraday_candles(ticker.upper(), start, end))

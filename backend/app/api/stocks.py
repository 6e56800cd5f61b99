"""
Stocks API router.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from app.schemas.domain import StockInfo
from app.schemas.enums import DataSource
from app.schemas.responses import ApiResponse
from app.services.store import Store, get_store

router = APIRouter()


@router.get("", response_model=ApiResponse[List[StockInfo]])
def get_stocks(
    source: Optional[DataSource] = Query(None),
    store: Store = Depends(get_store),
):
    """Get all stored stocks, optionally from one data source."""
    return ApiResponse.ok(store.list_stocks(source))


@router.get("/{ticker}", response_model=ApiResponse[StockInfo])
def get_stock(
    ticker: str,
    source: Optional[DataSource] = Query(None),
    store: Store = Depends(get_store),
):
    """
    Get a single stock. Without a source, the most recently updated
    row across data sources is returned.
    """
    stock = store.get_stock(ticker, source)
    if stock is None:
        raise HTTPException(status_code=404, detail=f"Stock not found: {ticker.upper()}")
    return ApiResponse.ok(stock)

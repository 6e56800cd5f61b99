"""
Store: upserts and reads for stocks, performance and candles.

All writes are upserts on the table's natural key and run in a single
transaction per call. Performance reads only return records that are
still current relative to the last market close.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterator, List, Optional, Sequence

from sqlalchemy import delete, desc, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import create_db_engine, create_session_factory
from app.core.migrations import run_migrations
from app.models import Candle, DailyCandle, Performance, Stock
from app.schemas.domain import CandleBar, Group, PerformanceSnapshot, StockInfo
from app.schemas.enums import DataSource, TickerType
from app.utils.market import is_upto_date

logger = logging.getLogger(__name__)

# Rows per INSERT statement; keeps SQLite under its bound-parameter limit
UPSERT_BATCH_SIZE = 500

_stores: Dict[str, "Store"] = {}
_stores_lock = threading.Lock()


class StoreError(RuntimeError):
    """A store operation failed; the database error is chained."""


def _upsert(
    db: Session,
    model,
    rows: List[dict],
    conflict_cols: Sequence[str],
    update_cols: Sequence[str],
) -> None:
    """INSERT .. ON CONFLICT DO UPDATE for SQLite and PostgreSQL."""
    if not rows:
        return

    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    elif dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        _merge_rows(db, model, rows, conflict_cols, update_cols)
        return

    for start in range(0, len(rows), UPSERT_BATCH_SIZE):
        stmt = insert(model).values(rows[start:start + UPSERT_BATCH_SIZE])
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_cols),
            set_={col: stmt.excluded[col] for col in update_cols},
        )
        db.execute(stmt)


def _merge_rows(db: Session, model, rows, conflict_cols, update_cols) -> None:
    """Row-by-row upsert for backends without ON CONFLICT."""
    for row in rows:
        existing = (
            db.query(model)
            .filter_by(**{col: row[col] for col in conflict_cols})
            .first()
        )
        if existing:
            for col in update_cols:
                setattr(existing, col, row[col])
        else:
            db.add(model(**row))


def _stock_info(row: Stock) -> StockInfo:
    return StockInfo(
        source=DataSource(row.source),
        ticker=row.ticker,
        exchange=row.exchange,
        sector=Group(name=row.sector_name, url=row.sector_url),
        industry=Group(name=row.industry_name, url=row.industry_url),
        last_update=row.last_update,
    )


def _snapshot(row: Performance) -> PerformanceSnapshot:
    return PerformanceSnapshot(
        ticker=row.ticker,
        ticker_type=TickerType(row.ticker_type),
        perf_1m=row.perf_1m,
        perf_3m=row.perf_3m,
        perf_6m=row.perf_6m,
        perf_1y=row.perf_1y,
        extra_info=row.extra_info or {},
        last_updated=row.last_updated,
    )


class Store:
    """Query layer over one database."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = create_session_factory(engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Transactional scope: commit on success, roll back on any error."""
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # ── Stock methods ────────────────────────────────────────────────────

    def get_stock(self, ticker: str, source: Optional[DataSource] = None) -> Optional[StockInfo]:
        """
        Stock row for (source, ticker).

        Without a source, the most recently updated row across sources.
        """
        ticker = ticker.upper()
        try:
            with self.session() as db:
                query = db.query(Stock).filter(Stock.ticker == ticker)
                if source is not None:
                    query = query.filter(Stock.source == DataSource(source).value)
                row = query.order_by(desc(Stock.last_update), Stock.source).first()
                return _stock_info(row) if row else None
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query stock: {ticker}") from e

    def list_stocks(self, source: Optional[DataSource] = None) -> List[StockInfo]:
        try:
            with self.session() as db:
                query = db.query(Stock)
                if source is not None:
                    query = query.filter(Stock.source == DataSource(source).value)
                return [_stock_info(r) for r in query.order_by(Stock.ticker, Stock.source)]
        except SQLAlchemyError as e:
            raise StoreError("Failed to list stocks") from e

    def add_stocks(self, stocks: Sequence[StockInfo]) -> None:
        rows = [
            {
                "source": s.source.value,
                "ticker": s.ticker,
                "exchange": s.exchange,
                "sector_name": s.sector.name,
                "sector_url": s.sector.url,
                "industry_name": s.industry.name,
                "industry_url": s.industry.url,
                "last_update": s.last_update,
            }
            for s in stocks
        ]
        try:
            with self.session() as db:
                _upsert(
                    db, Stock, rows,
                    conflict_cols=("source", "ticker"),
                    update_cols=(
                        "exchange", "sector_name", "sector_url",
                        "industry_name", "industry_url", "last_update",
                    ),
                )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save {len(rows)} stocks") from e

    def evict_stale_stocks(self, days: Optional[int] = None, today: Optional[date] = None) -> int:
        """Delete stocks not updated in the last `days` days. Returns rows removed."""
        days = settings.STALE_STOCK_DAYS if days is None else days
        cutoff = (today or date.today()) - timedelta(days=days)
        try:
            with self.session() as db:
                result = db.execute(delete(Stock).where(Stock.last_update < cutoff))
                evicted = result.rowcount or 0
        except SQLAlchemyError as e:
            raise StoreError("Failed to evict stale stock rows") from e

        if evicted:
            logger.info("Evicted %d stock rows last updated before %s", evicted, cutoff)
        return evicted

    # ── Performance methods ──────────────────────────────────────────────

    def save_performances(self, perfs: Sequence[PerformanceSnapshot]) -> None:
        rows = [
            {
                "ticker": p.ticker,
                "ticker_type": p.ticker_type.value,
                "perf_1m": p.perf_1m,
                "perf_3m": p.perf_3m,
                "perf_6m": p.perf_6m,
                "perf_1y": p.perf_1y,
                "extra_info": dict(p.extra_info),
                "last_updated": p.last_updated,
            }
            for p in perfs
        ]
        try:
            with self.session() as db:
                _upsert(
                    db, Performance, rows,
                    conflict_cols=("ticker", "ticker_type"),
                    update_cols=(
                        "perf_1m", "perf_3m", "perf_6m", "perf_1y",
                        "extra_info", "last_updated",
                    ),
                )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save {len(rows)} performance records") from e

    def get_performance(
        self,
        ticker: str,
        ticker_type: TickerType,
        now: Optional[datetime] = None,
    ) -> Optional[PerformanceSnapshot]:
        """The stored record, or None when missing or no longer current."""
        try:
            with self.session() as db:
                row = (
                    db.query(Performance)
                    .filter(
                        Performance.ticker == ticker,
                        Performance.ticker_type == TickerType(ticker_type).value,
                    )
                    .first()
                )
                perf = _snapshot(row) if row else None
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query performance: {ticker}") from e

        if perf is not None and is_upto_date(perf.last_updated, now):
            return perf
        return None

    def get_all_performances(self, now: Optional[datetime] = None) -> List[PerformanceSnapshot]:
        try:
            with self.session() as db:
                rows = (
                    db.query(Performance)
                    .order_by(Performance.ticker_type, Performance.ticker)
                    .all()
                )
                perfs = [_snapshot(r) for r in rows]
        except SQLAlchemyError as e:
            raise StoreError("Failed to query performance records") from e

        return [p for p in perfs if is_upto_date(p.last_updated, now)]

    def get_performances_by_type(
        self,
        ticker_type: TickerType,
        now: Optional[datetime] = None,
    ) -> List[PerformanceSnapshot]:
        try:
            with self.session() as db:
                rows = (
                    db.query(Performance)
                    .filter(Performance.ticker_type == TickerType(ticker_type).value)
                    .order_by(Performance.ticker)
                    .all()
                )
                perfs = [_snapshot(r) for r in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query {TickerType(ticker_type).value} performance") from e

        return [p for p in perfs if is_upto_date(p.last_updated, now)]

    # ── Candle methods ───────────────────────────────────────────────────

    def get_candles(
        self,
        ticker: str,
        lookback_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[CandleBar]:
        """Daily candles within the lookback window, oldest first."""
        lookback_days = settings.CANDLE_LOOKBACK_DAYS if lookback_days is None else lookback_days
        since = (now or datetime.now(timezone.utc)) - timedelta(days=lookback_days)
        try:
            with self.session() as db:
                rows = db.execute(
                    select(DailyCandle)
                    .where(DailyCandle.ticker == ticker, DailyCandle.ds >= since)
                    .order_by(DailyCandle.ds)
                ).scalars()
                return [
                    CandleBar(
                        timestamp=r.ds,
                        open=r.open,
                        high=r.high,
                        low=r.low,
                        close=r.close,
                        volume=r.volume,
                        last_updated=r.last_updated,
                    )
                    for r in rows
                ]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query candles: {ticker}") from e

    def save_candles(self, ticker: str, candles: Sequence[CandleBar]) -> None:
        written_at = datetime.now(timezone.utc)
        rows = [
            {
                "ticker": ticker,
                "ds": c.timestamp,
                "open": c.open,
                "high": c.high,
                "low": c.low,
                "close": c.close,
                "volume": c.volume,
                "last_updated": c.last_updated or written_at,
            }
            for c in candles
        ]
        try:
            with self.session() as db:
                _upsert(
                    db, DailyCandle, rows,
                    conflict_cols=("ticker", "ds"),
                    update_cols=("open", "high", "low", "close", "volume", "last_updated"),
                )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save {len(rows)} candles: {ticker}") from e

    def get_intraday_candles(
        self,
        ticker: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[CandleBar]:
        """Intraday candles with start <= timestamp <= end, oldest first."""
        query = select(Candle).where(Candle.ticker == ticker)
        if start is not None:
            query = query.where(Candle.timestamp >= start)
        if end is not None:
            query = query.where(Candle.timestamp <= end)
        try:
            with self.session() as db:
                rows = db.execute(query.order_by(Candle.timestamp)).scalars()
                return [
                    CandleBar(
                        timestamp=r.timestamp,
                        open=r.open,
                        high=r.high,
                        low=r.low,
                        close=r.close,
                        volume=r.volume,
                    )
                    for r in rows
                ]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query intraday candles: {ticker}") from e

    def save_intraday_candles(self, ticker: str, candles: Sequence[CandleBar]) -> None:
        rows = [
            {
                "ticker": ticker,
                "timestamp": c.timestamp,
                "open": c.open,
                "high": c.high,
                "low": c.low,
                "close": c.close,
                "volume": c.volume,
            }
            for c in candles
        ]
        try:
            with self.session() as db:
                _upsert(
                    db, Candle, rows,
                    conflict_cols=("ticker", "timestamp"),
                    update_cols=("open", "high", "low", "close", "volume"),
                )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save {len(rows)} intraday candles: {ticker}") from e


def load_store(database_url: Optional[str] = None) -> Store:
    """
    Shared store for `database_url` (default settings.DATABASE_URL).

    The first load migrates the schema and evicts stale stock rows.
    """
    url = database_url or settings.DATABASE_URL
    with _stores_lock:
        store = _stores.get(url)
        if store is not None:
            return store

        run_migrations(url)
        store = Store(create_db_engine(url))
        store.evict_stale_stocks()
        _stores[url] = store
        logger.info("Opened store at %s", store.engine.url.render_as_string(hide_password=True))
        return store


def get_store() -> Store:
    """FastAPI dependency returning the default store."""
    return load_store()

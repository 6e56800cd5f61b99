"""
SQLAlchemy ORM models for daily and intraday price candles.
"""

from sqlalchemy import Column, Integer, BigInteger, String, Float, Index, UniqueConstraint

from .base import Base, UTCDateTime


class DailyCandle(Base):
    """
    One OHLCV bar per ticker per trading day.

    `ds` is the bar's start time; last_updated records when the bar was
    last written so readers can tell whether it is current.
    """

    __tablename__ = "daily_candles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String, nullable=False)
    ds = Column(UTCDateTime, nullable=False)
    open = Column(Float, nullable=False)
    high = Column(Float, nullable=False)
    low = Column(Float, nullable=False)
    close = Column(Float, nullable=False)
    volume = Column(BigInteger, nullable=False)
    last_updated = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("ticker", "ds", name="uq_daily_candles_ticker_ds"),
        {"sqlite_autoincrement": True},
    )


class Candle(Base):
    """Intraday OHLCV bar, keyed by (ticker, timestamp)."""

    __tablename__ = "candles"

    ticker = Column(String, primary_key=True, nullable=False)
    timestamp = Column(UTCDateTime, primary_key=True, nullable=False)
    open = Column(Float, nullable=False)
    high = Column(Float, nullable=False)
    low = Column(Float, nullable=False)
    close = Column(Float, nullable=False)
    volume = Column(BigInteger, nullable=False)

    __table_args__ = (
        Index("idx_candles_ticker_ts", "ticker", "timestamp"),
    )

"""
SQLAlchemy ORM model for Performance.
"""

from sqlalchemy import Column, Integer, String, Float, JSON, UniqueConstraint, text

from .base import Base, UTCDateTime


class Performance(Base):
    """
    Trailing returns (percent) for a sector, industry or stock.

    One row per (ticker, ticker_type); extra_info holds any further
    named metrics and defaults to an empty object.
    """

    __tablename__ = "performance"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String, nullable=False)
    ticker_type = Column(String, nullable=False)  # TickerType enum as string
    perf_1m = Column(Float, nullable=False)
    perf_3m = Column(Float, nullable=False)
    perf_6m = Column(Float, nullable=False)
    perf_1y = Column(Float, nullable=False)
    extra_info = Column(JSON, nullable=False, default=dict, server_default=text("'{}'"))
    last_updated = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("ticker", "ticker_type", name="uq_performance_ticker_type"),
        {"sqlite_autoincrement": True},
    )

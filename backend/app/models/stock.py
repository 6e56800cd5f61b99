"""
SQLAlchemy ORM model for Stock reference data.
"""

from sqlalchemy import Column, String, Date, Index

from .base import Base


class Stock(Base):
    """
    A ticker with its exchange and sector/industry classification.

    Keyed by (source, ticker) so the same symbol reported by different
    data providers ("tv", "yf") is stored once per provider.
    """

    __tablename__ = "stocks"

    source = Column(String, primary_key=True, nullable=False)
    ticker = Column(String, primary_key=True, nullable=False)
    exchange = Column(String, nullable=False)
    sector_name = Column(String, nullable=False)
    sector_url = Column(String, nullable=False)
    industry_name = Column(String, nullable=False)
    industry_url = Column(String, nullable=False)
    last_update = Column(Date, nullable=False)

    __table_args__ = (
        Index("idx_stocks_source", "source"),
        Index("idx_stocks_last_update", "last_update"),
    )

    def __repr__(self):
        return f"<Stock {self.source}:{self.ticker} {self.exchange}>"

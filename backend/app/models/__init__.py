"""
SQLAlchemy ORM models for the stock-themes backend.

This module exports the Base declarative base and all ORM models
for use by Alembic and the application.
"""

from .base import Base, UTCDateTime

# Import all models to ensure they're registered with Base
from .stock import Stock
from .performance import Performance
from .candle import DailyCandle, Candle

__all__ = [
    "Base",
    "UTCDateTime",
    "Stock",
    "Performance",
    "DailyCandle",
    "Candle",
]

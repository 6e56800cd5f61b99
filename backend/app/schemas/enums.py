"""
Enum definitions for stock-themes domain models.
"""

from enum import Enum


class TickerType(str, Enum):
    """What a performance record describes."""

    SECTOR = "Sector"
    INDUSTRY = "Industry"
    STOCK = "Stock"


class DataSource(str, Enum):
    """Provider a stock row was loaded from."""

    TRADINGVIEW = "tv"
    YAHOO = "yf"

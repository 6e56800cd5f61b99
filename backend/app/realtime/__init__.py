"""
Realtime change events for the stock-themes backend.

Publishes notifications to Redis pub/sub when the store is written:
- Stock reference updates
- Daily candle updates
- Performance updates
"""

from .publish import (
    publish_stocks_update,
    publish_candles_update,
    publish_performance_update,
)

__all__ = [
    "publish_stocks_update",
    "publish_candles_update",
    "publish_performance_update",
]

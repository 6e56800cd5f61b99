"""
Redis pub/sub channel names for store change events.
"""

# Stock reference rows upserted
CHANNEL_STOCKS_UPDATED = "stocks_updated"

# Daily candles upserted for a ticker
CHANNEL_CANDLES_UPDATED = "candles_updated"

# Performance records upserted
CHANNEL_PERFORMANCE_UPDATED = "performance_updated"

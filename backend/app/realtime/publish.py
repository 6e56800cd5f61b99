"""
Redis publish helpers for store change events.

Each helper serializes a small JSON payload naming what changed so that
subscribers can re-read the store. Nothing is published when Redis is
not configured.
"""

import json
import logging
from typing import Any, Dict, Iterable, Optional
from datetime import datetime, timezone
from app.core.redis import get_redis, redis_enabled
from app.realtime.channels import (
    CHANNEL_STOCKS_UPDATED,
    CHANNEL_CANDLES_UPDATED,
    CHANNEL_PERFORMANCE_UPDATED,
)
from app.schemas.domain import PerformanceSnapshot

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def _publish(channel: str, payload: Dict[str, Any]) -> bool:
    if not redis_enabled():
        logger.debug("Redis disabled, not publishing to %s", channel)
        return False

    redis_client = await get_redis()
    await redis_client.publish(channel, json.dumps(payload))
    logger.debug("Published to %s: %s", channel, payload)
    return True


async def publish_stocks_update(tickers: Iterable[str], source: str) -> bool:
    """
    Publish that stock rows were upserted.

    Args:
        tickers: Tickers written
        source: Data source of the rows ("tv" or "yf")
    """
    return await _publish(
        CHANNEL_STOCKS_UPDATED,
        {"source": source, "tickers": list(tickers), "timestamp": _now_iso()},
    )


async def publish_candles_update(
    ticker: str,
    count: int,
    latest: Optional[datetime] = None,
) -> bool:
    """
    Publish that daily candles were upserted for a ticker.

    Args:
        ticker: The ticker
        count: Number of candles now available
        latest: Time of the newest candle
    """
    payload: Dict[str, Any] = {
        "ticker": ticker,
        "count": count,
        "timestamp": _now_iso(),
    }
    if latest is not None:
        payload["latest"] = latest.isoformat()
    return await _publish(CHANNEL_CANDLES_UPDATED, payload)


async def publish_performance_update(perfs: Iterable[PerformanceSnapshot]) -> bool:
    """Publish that performance records were upserted, grouped by ticker type."""
    by_type: Dict[str, list] = {}
    for p in perfs:
        by_type.setdefault(p.ticker_type.value, []).append(p.ticker)
    if not by_type:
        return False
    return await _publish(
        CHANNEL_PERFORMANCE_UPDATED,
        {"tickers": by_type, "timestamp": _now_iso()},
    )

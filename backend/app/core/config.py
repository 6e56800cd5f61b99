"""
Configuration for the stock-themes backend.

Reads database, cache and market settings from environment variables
(or a local .env file), with defaults for local development.
"""

import os
from datetime import time
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings including database and market configuration."""

    # Database configuration
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///database.sqlite"
    )

    # Redis pub/sub for change events (empty disables publishing)
    REDIS_URL: str = ""

    LOG_LEVEL: str = "INFO"

    # Regular trading session, in MARKET_TIMEZONE
    MARKET_TIMEZONE: str = "America/New_York"
    MARKET_OPEN: time = time(9, 30)
    MARKET_CLOSE: time = time(16, 0)

    # Benchmark used for relative strength
    BASE_TICKER: str = "SPY"
    IGNORED_STOCKS: List[str] = []

    # Retention
    STALE_STOCK_DAYS: int = 30
    CANDLE_LOOKBACK_DAYS: int = 2 * 365

    HTTP_HOST: str = "127.0.0.1"
    HTTP_PORT: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once per process."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # yfinance logs every failed lookup at ERROR; we report those ourselves
    logging.getLogger("yfinance").setLevel(logging.CRITICAL)

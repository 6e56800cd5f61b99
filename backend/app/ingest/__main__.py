"""
CLI entrypoint for the ingestion pipeline.

Usage:
    python -m app.ingest watchlist.csv
    python -m app.ingest a.csv b.csv -n 4 -s "AAPL,MSFT" --refresh --intraday
"""

import argparse
import asyncio
import logging
import sys

from app.core.logging import configure_logging
from app.core.redis import close_redis
from app.ingest.pipeline import run_ingest
from app.services.store import load_store
from app.services.yahoo import YahooFinanceClient
from app.utils.watchlist import read_stocks

logger = logging.getLogger("app.ingest")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load stock info, candles and performance for watchlist CSV files"
    )
    parser.add_argument("files", nargs="+", help="Watchlist CSV files to process")
    parser.add_argument(
        "-n", "--skip-lines",
        type=int,
        default=4,
        help="Header lines to skip in each file"
    )
    parser.add_argument(
        "-s", "--skip-stocks",
        default="",
        help="Comma separated list of stocks to skip"
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Re-fetch stock info even when it is already stored"
    )
    parser.add_argument(
        "--intraday",
        action="store_true",
        help="Also store the last five days of 5 minute candles"
    )
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    return parser


async def _run(args: argparse.Namespace) -> None:
    store = load_store(args.database_url)
    tickers = read_stocks(args.files, args.skip_lines, args.skip_stocks)
    logger.info("Total unique stocks: %d", len(tickers))
    try:
        await run_ingest(
            store,
            YahooFinanceClient(),
            tickers,
            refresh=args.refresh,
            intraday=args.intraday,
        )
    finally:
        await close_redis()


def main(argv=None):
    """Main entrypoint for the ingestion CLI."""
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        asyncio.run(_run(args))
    except Exception:
        logger.exception("Ingestion failed")
        sys.exit(1)


if __name__ == "__main__":
    main()

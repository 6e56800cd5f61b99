"""
Watchlist CSV loading.

Watchlist exports carry a few header lines, then one row per ticker with
the symbol in the first column.
"""

import logging
import random
from pathlib import Path
from typing import Iterable, List, Optional, Union

from app.core.config import settings

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def parse_stocks(csv_file: PathLike, skip_lines: int) -> List[str]:
    """Upper-cased first-column tickers of `csv_file` after `skip_lines` lines."""
    path = Path(csv_file).resolve()
    logger.debug("Reading %s", path)

    with open(path, "r", encoding="utf-8-sig") as f:
        lines = f.read().splitlines()

    result = []
    for line in lines[skip_lines:]:
        ticker = line.strip().split(",", 1)[0].strip().upper()
        if ticker:
            result.append(ticker)

    logger.info("Processed %d lines, found %d stocks", len(lines), len(result))
    return result


def read_stocks(
    files: Iterable[PathLike],
    skip_lines: int,
    skip_stocks: str = "",
    ignored: Optional[Iterable[str]] = None,
    shuffle: bool = True,
) -> List[str]:
    """
    Unique tickers from all `files`, minus skipped and ignored ones.

    `skip_stocks` is a comma separated list; `ignored` defaults to
    settings.IGNORED_STOCKS. The result is shuffled unless told otherwise.
    """
    if ignored is None:
        ignored = settings.IGNORED_STOCKS

    skips = {
        s.strip().upper()
        for s in [*skip_stocks.split(","), *ignored]
        if s.strip()
    }
    if skips:
        if len(skips) <= 10:
            logger.info("Skipping: [%s]", ",".join(sorted(skips)))
        else:
            logger.info("Skipping %d stocks", len(skips))

    stocks: List[str] = []
    seen = set()
    for file in files:
        for ticker in parse_stocks(file, skip_lines):
            if ticker in skips or ticker in seen:
                continue
            seen.add(ticker)
            stocks.append(ticker)

    if shuffle:
        random.shuffle(stocks)
    return stocks

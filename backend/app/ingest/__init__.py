"""
Ingestion of watchlist tickers into the stock-themes store.
"""

from .pipeline import IngestResult, run_ingest

__all__ = ["IngestResult", "run_ingest"]

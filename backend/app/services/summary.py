"""
Sector / industry summary of a set of stocks, with relative strength
of every group and stock against the benchmark.
"""

from typing import Dict, Iterable

from app.schemas.domain import (
    PerformanceSnapshot,
    StockInfo,
    Summary,
    SummaryIndustry,
    SummaryReport,
    SummarySector,
    TickerRef,
)
from app.utils.market import compute_rs


def _group_by(items, key) -> Dict[str, list]:
    groups: Dict[str, list] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def summarize(stocks: Iterable[StockInfo]) -> Summary:
    """Group stocks by sector then industry; biggest groups first."""
    sectors = []
    for sector_name, sector_stocks in _group_by(stocks, lambda s: s.sector.name).items():
        industries = [
            SummaryIndustry(
                name=industry_name,
                url=industry_stocks[0].industry.url,
                size=len(industry_stocks),
                tickers=[TickerRef(exchange=s.exchange, ticker=s.ticker) for s in industry_stocks],
            )
            for industry_name, industry_stocks in _group_by(
                sector_stocks, lambda s: s.industry.name
            ).items()
        ]
        industries.sort(key=lambda si: si.size, reverse=True)
        sectors.append(
            SummarySector(
                name=sector_name,
                url=sector_stocks[0].sector.url,
                size=sum(si.size for si in industries),
                industries=industries,
            )
        )

    sectors.sort(key=lambda ss: ss.size, reverse=True)
    return Summary(size=sum(ss.size for ss in sectors), sectors=sectors)


def rs_map(perfs: Iterable[PerformanceSnapshot], base: PerformanceSnapshot) -> Dict[str, float]:
    """Ticker -> relative strength, rounded to two decimals."""
    return {p.ticker: round(compute_rs(p, base) * 100.0) / 100.0 for p in perfs}


def build_report(
    summary: Summary,
    sectors: Iterable[PerformanceSnapshot],
    industries: Iterable[PerformanceSnapshot],
    stocks: Iterable[PerformanceSnapshot],
    base: PerformanceSnapshot,
) -> SummaryReport:
    return SummaryReport(
        benchmark=base.ticker,
        summary=summary,
        sectorRs=rs_map(sectors, base),
        industryRs=rs_map(industries, base),
        stockRs=rs_map(stocks, base),
    )

"""
Application service: join price history and dividend events by calendar year.

Business decisions owned here:
  - year start/end price are the first/last close observed in that year.
  - dividends of the same year are summed, never overwritten.
  - rounding to two decimals happens once, when the result is assembled.
"""

import math
from collections import defaultdict

from src.domain.entities.analysis import AnalysisResult, YearlyRecord
from src.domain.entities.dividend import DividendEvent
from src.domain.entities.stock_price import PriceHistory
from src.domain.errors import NoData

DAYS_PER_YEAR = 365.25


def compound_annual_growth_percent(start_value: float, end_value: float, years: float) -> float:
    """CAGR in percent; 0 when the period or the start value is not positive."""
    if years <= 0 or start_value <= 0:
        return 0.0
    return ((end_value / start_value) ** (1 / years) - 1) * 100


def round2(value: float) -> float:
    """Round half up to two decimals (0.125 -> 0.13, -0.125 -> -0.12)."""
    return math.floor(value * 100 + 0.5) / 100


def build_analysis(history: PriceHistory, dividends: list[DividendEvent]) -> AnalysisResult:
    """Derive yearly growth/yield records and the whole-series CAGR.

    Raises:
        NoData: if *history* has no bars.
    """
    bars = history.bars
    if not bars:
        raise NoData(f"No price history for {history.code}")

    first, last = bars[0], bars[-1]
    years = (last.date - first.date).days / DAYS_PER_YEAR
    cagr = compound_annual_growth_percent(first.close, last.close, years)

    start_by_year: dict[int, float] = {}
    end_by_year: dict[int, float] = {}
    for bar in bars:
        start_by_year.setdefault(bar.date.year, bar.close)
        end_by_year[bar.date.year] = bar.close

    dividend_by_year: dict[int, float] = defaultdict(float)
    for event in dividends:
        dividend_by_year[event.year] += event.cash_per_share

    records = []
    for year in sorted(set(start_by_year) | set(dividend_by_year)):
        total = dividend_by_year.get(year, 0.0)
        start_price = start_by_year.get(year, 0.0)
        end_price = end_by_year.get(year, 0.0)
        growth = (end_price - start_price) / start_price * 100 if start_price > 0 else 0.0
        dividend_yield = total / end_price * 100 if end_price > 0 else 0.0
        records.append(
            YearlyRecord(
                year=year,
                total_dividend=round2(total),
                dividend_yield_percent=round2(dividend_yield),
                growth_rate_percent=round2(growth),
                year_start_price=round2(start_price),
                year_end_price=round2(end_price),
            )
        )

    return AnalysisResult(
        symbol=history.code,
        name=history.name,
        start_date=first.date,
        end_date=last.date,
        start_price=round2(first.close),
        end_price=round2(last.close),
        years=round2(years),
        cagr_percent=round2(cagr),
        yearly_records=records,
        has_dividends=bool(records),
    )

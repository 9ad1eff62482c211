"""
Domain entities produced by the analysis pipeline.
Zero external dependencies; pure Python dataclasses only.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class YearlyRecord:
    year: int
    total_dividend: float
    dividend_yield_percent: float
    growth_rate_percent: float
    year_start_price: float
    year_end_price: float


@dataclass(frozen=True)
class AnalysisResult:
    symbol: str
    start_date: date
    end_date: date
    start_price: float
    end_price: float
    years: float
    cagr_percent: float
    yearly_records: list[YearlyRecord] = field(default_factory=list)
    has_dividends: bool = False
    name: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class SimulationResult:
    buy_year: int
    buy_price: float
    principal: float
    reinvest: bool
    shares: float
    final_shares: float
    final_price: float
    end_value: float
    cash_received: float
    terminal_value: float
    total_return: float
    total_return_percent: float
    years: float
    cagr_percent: float

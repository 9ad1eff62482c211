"""
Domain entities for daily price history.
Zero external dependencies; pure Python dataclasses only.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class PriceBar:
    date: date
    open: float
    close: float
    high: float
    low: float
    volume: int


@dataclass(frozen=True)
class PriceHistory:
    code: str
    name: Optional[str]
    bars: list[PriceBar]

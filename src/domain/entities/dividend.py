"""
Domain entity for a single cash-dividend distribution.
Zero external dependencies; pure Python dataclasses only.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class DividendEvent:
    year: int
    cash_per_share: float
    ex_date: Optional[date] = None

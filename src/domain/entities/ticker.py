"""
Domain entity for a resolved A-share ticker.
Zero external dependencies; pure Python dataclasses only.
"""

from dataclasses import dataclass
from enum import Enum


class Market(str, Enum):
    SH = "sh"  # Shanghai
    SZ = "sz"  # Shenzhen

    @property
    def secid_prefix(self) -> str:
        return "1" if self is Market.SH else "0"


@dataclass(frozen=True)
class TickerIdentifier:
    code: str
    market: Market

    @property
    def secid(self) -> str:
        """Provider identifier, e.g. ``1.600519``."""
        return f"{self.market.secid_prefix}.{self.code}"

    @property
    def f10_symbol(self) -> str:
        """Exchange-prefixed code used by the F10 pages, e.g. ``SH600519``."""
        return f"{self.market.value.upper()}{self.code}"

    @property
    def is_likely_fund(self) -> bool:
        """Best-effort ETF/LOF check by code prefix; not an authoritative classification."""
        return self.code[:2] in FUND_PREFIXES


FUND_PREFIXES = frozenset({"51", "56", "58", "15", "16"})

"""
Pure text/number parsers for EastMoney payloads.

Kept free of I/O so each rule can be tested against literal strings:
  - parse_cash_per_share_from_profile: "10派3.75元" -> 0.375
  - parse_fund_dividend_page: per-share cash rows of a fund disclosure page
  - load_json_or_jsonp: JSON body, or JSON wrapped in a callback(...) call
"""

import json
import math
import re
from datetime import date
from typing import Any, Optional

from src.domain.entities.dividend import DividendEvent

MIN_YEAR = 1990
MAX_YEAR = 2100

# "10派3.75元": per 10 shares, distribution verb, amount, optional yuan unit.
_PROFILE_CASH_RE = re.compile(r"10[派送](\d+\.?\d*)\s*元?")
_NO_DISTRIBUTION_RE = re.compile(r"不分配|不转增")

_JSONP_RE = re.compile(r"^\w+\((.*)\)\s*;?$", re.DOTALL)
_YEAR_PREFIX_RE = re.compile(r"^(\d{4})")

# Successively looser patterns for "每份派现金X元" rows, tried in order.
FUND_PAGE_PATTERNS = [
    # | 2025年 | 2025-12-17 | 2025-12-18 | 每份派现金0.0200元 | 2025-12-23 |
    re.compile(r"(\d{4})年\s*\|\s*[\d-]+\s*\|\s*[\d-]+\s*\|\s*每份派现金\s*([\d.]+)\s*元"),
    re.compile(r"(\d{4})年[\s\S]{0,200}?每份派现金\s*([\d.]+)\s*元"),
    re.compile(r"<td[^>]*>(\d{4})年</td>[\s\S]{0,500}?<td[^>]*>每份派现金\s*([\d.]+)\s*元</td>"),
]


def positive_amount(value: Any) -> Optional[float]:
    """Return *value* as a finite float > 0, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def parse_date(value: Any) -> Optional[date]:
    """Parse the leading YYYY-MM-DD (or YYYY/MM/DD) part of *value*."""
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10].replace("/", "-"))
    except ValueError:
        return None


def plausible_year(year: int) -> bool:
    return MIN_YEAR < year < MAX_YEAR


def parse_year(value: Any) -> Optional[int]:
    """Year of a date string, a bare "2023..." prefix, or an int; None if implausible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        year = int(value)
    else:
        text = str(value).strip()
        parsed = parse_date(text)
        if parsed is not None:
            year = parsed.year
        else:
            match = _YEAR_PREFIX_RE.match(text)
            if not match:
                return None
            year = int(match.group(1))
    return year if plausible_year(year) else None


def parse_cash_per_share_from_profile(profile: Optional[str]) -> Optional[float]:
    """Cash per share encoded in an implementation-plan profile.

    Returns None for empty text, "no distribution" text, or text without a
    "10派X" ratio.
    """
    if not profile or _NO_DISTRIBUTION_RE.search(profile):
        return None
    match = _PROFILE_CASH_RE.search(profile)
    if not match:
        return None
    amount = positive_amount(match.group(1))
    return amount / 10 if amount is not None else None


def parse_fund_dividend_page(html: str) -> list[DividendEvent]:
    """Events from the first pattern in FUND_PAGE_PATTERNS that yields any row."""
    for pattern in FUND_PAGE_PATTERNS:
        events = []
        for match in pattern.finditer(html):
            year = int(match.group(1))
            amount = positive_amount(match.group(2))
            if plausible_year(year) and amount is not None:
                events.append(DividendEvent(year=year, cash_per_share=amount))
        if events:
            return events
    return []


def load_json_or_jsonp(text: str) -> Any:
    """Decode *text* as JSON, stripping a leading ``callback(...)`` wrapper if needed.

    Raises:
        ValueError: if neither form decodes.
    """
    try:
        return json.loads(text)
    except ValueError:
        match = _JSONP_RE.match(text.strip())
        if not match:
            raise
        return json.loads(match.group(1))

"""
Application service: map a user-typed code onto an exchange-qualified ticker.

Classification rules are applied in order, first match wins:
  - first digit 6, 5 or 9           -> Shanghai
  - first two digits 51, 56 or 58   -> Shanghai (ETF ranges)
  - first digit 0 or 3              -> Shenzhen
  - first two digits 15 or 16       -> Shenzhen (ETF/LOF ranges)
"""

import re

from src.domain.entities.ticker import Market, TickerIdentifier
from src.domain.errors import InvalidTicker

_CODE_RE = re.compile(r"[0-9]{6}")
_WHITESPACE_RE = re.compile(r"\s+")

_RULES: list[tuple[tuple[str, ...], Market]] = [
    (("6", "5", "9"), Market.SH),
    (("51", "56", "58"), Market.SH),
    (("0", "3"), Market.SZ),
    (("15", "16"), Market.SZ),
]


def resolve_ticker(raw: str) -> TickerIdentifier:
    """Resolve *raw* into a TickerIdentifier.

    Raises:
        InvalidTicker: unless *raw* reduces to exactly six ASCII digits with a
                       known exchange prefix.
    """
    code = _WHITESPACE_RE.sub("", raw or "")
    if not _CODE_RE.fullmatch(code):
        raise InvalidTicker(
            f"Unrecognised stock code {raw!r}: enter a 6-digit A-share code such as 600519 or 000001."
        )
    for prefixes, market in _RULES:
        if code.startswith(prefixes):
            return TickerIdentifier(code=code, market=market)
    raise InvalidTicker(f"Stock code {code!r} does not belong to the Shanghai or Shenzhen exchange.")

"""
Infrastructure adapter: EastMoney daily K-line API → IPriceHistoryProvider.
All push2his-specific details (query fields, bar string layout) are confined here;
the rest of the codebase depends only on IPriceHistoryProvider.
"""

import logging
from datetime import date
from typing import Optional

import httpx

from src.domain.entities.stock_price import PriceBar, PriceHistory
from src.domain.entities.ticker import TickerIdentifier
from src.domain.errors import NoData, UpstreamUnavailable
from src.domain.ports.stock_data_port import IPriceHistoryProvider
from src.infrastructure.stock_data.eastmoney_http import DEFAULT_IDENTITY, ProviderIdentity

log = logging.getLogger(__name__)

KLINE_URL = "https://push2his.eastmoney.com/api/qt/stock/kline/get"


def parse_kline(line: str) -> Optional[PriceBar]:
    """Parse ``"date,open,close,high,low,volume,..."`` into a PriceBar, or None."""
    parts = line.split(",")
    if len(parts) < 6:
        return None
    try:
        try:
            volume = int(float(parts[5]))
        except ValueError:
            volume = 0
        return PriceBar(
            date=date.fromisoformat(parts[0][:10]),
            open=float(parts[1]),
            close=float(parts[2]),
            high=float(parts[3]),
            low=float(parts[4]),
            volume=max(volume, 0),
        )
    except ValueError:
        return None


class EastMoneyPriceHistoryProvider(IPriceHistoryProvider):
    """Fetches full daily forward-adjusted history from EastMoney push2his."""

    MAX_BARS = 100_000

    def __init__(self, client: httpx.AsyncClient, identity: ProviderIdentity = DEFAULT_IDENTITY) -> None:
        self._client = client
        self._identity = identity

    async def get_price_history(self, ticker: TickerIdentifier) -> PriceHistory:
        params = {
            "secid": ticker.secid,
            "fields1": "f1,f2,f3,f4,f5,f6",
            "fields2": "f51,f52,f53,f54,f55,f56,f57,f58,f59,f60,f61",
            "klt": "101",  # daily
            "fqt": "1",  # forward-adjusted
            "beg": "0",
            "end": "20500000",
            "lmt": str(self.MAX_BARS),
        }
        try:
            response = await self._client.get(
                KLINE_URL, params=params, headers=self._identity.headers(self._identity.quote_referer)
            )
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailable(f"K-line request timed out for {ticker.secid}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"K-line request failed for {ticker.secid}: {exc}") from exc

        if not response.is_success:
            raise UpstreamUnavailable(f"K-line request failed: HTTP {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamUnavailable("K-line response is not valid JSON") from exc

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            data = {}
        lines = data.get("klines") or []

        bars = []
        for line in lines:
            bar = parse_kline(line) if isinstance(line, str) else None
            if bar is None:
                log.warning("Skipping malformed K-line for %s: %r", ticker.secid, line)
                continue
            bars.append(bar)

        if not bars:
            raise NoData(
                f"No K-line data for {ticker.code}; check the code "
                "(Shanghai/Shenzhen A-shares such as 600519 or 000001)."
            )
        return PriceHistory(code=ticker.code, name=data.get("name"), bars=bars)

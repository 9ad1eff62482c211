"""
Infrastructure adapters: EastMoney dividend endpoints → IDividendSource.

Four sources, in the priority order the composition root chains them:
  1. DataCenterDividendSource   structured data-center query
  2. F10BonusDividendSource     F10 bonus-financing page data (plan text / legacy rows)
  3. EtfQuoteDividendSource     quote-snapshot APIs, JSON or JSONP (funds only)
  4. FundPageDividendSource     fund disclosure HTML page scraping (funds only)

Every source honours the IDividendSource contract: network errors, bad
status codes and undecodable payloads are logged and reported as [].
"""

import logging
from abc import abstractmethod
from typing import Any, Optional

import httpx

from src.domain.entities.dividend import DividendEvent
from src.domain.entities.ticker import TickerIdentifier
from src.domain.ports.dividend_source_port import IDividendSource
from src.infrastructure.stock_data.eastmoney_http import DEFAULT_IDENTITY, ProviderIdentity
from src.infrastructure.stock_data.eastmoney_parsing import load_json_or_jsonp, parse_fund_dividend_page
from src.infrastructure.stock_data.eastmoney_rows import (
    DataCenterBonusRow,
    F10LegacyBonusRow,
    F10PlanRow,
    QuoteSnapshotRow,
    normalize_rows,
)

log = logging.getLogger(__name__)

DATACENTER_URL = "https://datacenter-web.eastmoney.com/api/data/v1/get"
DATACENTER_REPORT = "RPT_SHAREBONUS_DET"
DATACENTER_COLUMNS = (
    "SECURITY_CODE,REPORT_DATE,NOTICE_DATE,BONUS_TYPE,BASE_SHARE,CASH_TOTAL,"
    "CASH_PER_SHARE,EX_DIVIDEND_DATE"
)
F10_BONUS_URL = "https://emweb.securities.eastmoney.com/PC_HSF10/BonusFinancing/PageAjax"
QUOTE_CLIST_URL = "https://push2.eastmoney.com/api/qt/clist/get"
FUND_ARCHIVES_URL = "https://emweb.securities.eastmoney.com/PC_HSF10/FundArchivesDatas"
FUND_PAGE_URL = "https://fundf10.eastmoney.com/fhsp_{code}.html"


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


class _EastMoneyDividendSource(IDividendSource):
    """Shared request handling; subclasses implement _fetch_events()."""

    def __init__(self, client: httpx.AsyncClient, identity: ProviderIdentity = DEFAULT_IDENTITY) -> None:
        self._client = client
        self._identity = identity

    async def fetch(self, ticker: TickerIdentifier) -> list[DividendEvent]:
        try:
            return await self._fetch_events(ticker)
        except Exception as exc:
            log.warning("%s failed for %s: %s", self.name, ticker.code, exc)
            return []

    @abstractmethod
    async def _fetch_events(self, ticker: TickerIdentifier) -> list[DividendEvent]: ...

    async def _get(self, url: str, referer: str, params: Optional[dict] = None) -> Optional[httpx.Response]:
        response = await self._client.get(url, params=params, headers=self._identity.headers(referer))
        if not response.is_success:
            log.warning("%s got HTTP %d from %s", self.name, response.status_code, url)
            return None
        return response


class DataCenterDividendSource(_EastMoneyDividendSource):
    name = "datacenter"

    async def _fetch_events(self, ticker: TickerIdentifier) -> list[DividendEvent]:
        params = {
            "reportName": DATACENTER_REPORT,
            "columns": DATACENTER_COLUMNS,
            "filter": f"(SECURITY_CODE='{ticker.code}')",
            "pageNumber": "1",
            "pageSize": "500",
            "sortColumns": "EX_DIVIDEND_DATE",
            "sortTypes": "-1",
        }
        response = await self._get(DATACENTER_URL, self._identity.data_referer, params)
        if response is None:
            return []
        return normalize_rows(DataCenterBonusRow, self._rows(response.json()))

    @staticmethod
    def _rows(payload: Any) -> list:
        if not isinstance(payload, dict):
            return []
        # Current responses nest rows under "result"; older ones under "data".
        for key in ("result", "data"):
            block = payload.get(key)
            if isinstance(block, list):
                return block
            if isinstance(block, dict) and isinstance(block.get("data"), list):
                return block["data"]
        return []


class F10BonusDividendSource(_EastMoneyDividendSource):
    name = "f10-bonus"

    async def _fetch_events(self, ticker: TickerIdentifier) -> list[DividendEvent]:
        response = await self._get(
            F10_BONUS_URL, self._identity.quote_referer, {"code": ticker.f10_symbol}
        )
        if response is None:
            return []
        payload = response.json()
        if not isinstance(payload, dict):
            return []

        events = normalize_rows(F10PlanRow, _as_list(payload.get("fhyx")))
        if events:
            return events

        data = payload.get("data")
        sgbh = data.get("sgbh") if isinstance(data, dict) else None
        legacy = sgbh.get("data") if isinstance(sgbh, dict) else payload.get("sgbh")
        return normalize_rows(F10LegacyBonusRow, _as_list(legacy))


class EtfQuoteDividendSource(_EastMoneyDividendSource):
    name = "etf-quote"

    def applies_to(self, ticker: TickerIdentifier) -> bool:
        return ticker.is_likely_fund

    def _endpoints(self, ticker: TickerIdentifier) -> list[tuple[str, dict]]:
        return [
            (
                QUOTE_CLIST_URL,
                {
                    "pn": "1",
                    "pz": "1",
                    "po": "1",
                    "np": "1",
                    "fltt": "2",
                    "invt": "2",
                    "fid": "f3",
                    "fs": f"m:{ticker.market.secid_prefix}+t:3+s:{ticker.code}",
                },
            ),
            (FUND_ARCHIVES_URL, {"code": ticker.f10_symbol, "type": "sfhsp"}),
        ]

    async def _fetch_events(self, ticker: TickerIdentifier) -> list[DividendEvent]:
        for url, params in self._endpoints(ticker):
            try:
                response = await self._get(url, self._identity.quote_referer, params)
                if response is None:
                    continue
                payload = load_json_or_jsonp(response.text)
            except (httpx.HTTPError, ValueError) as exc:
                log.debug("%s endpoint %s failed for %s: %s", self.name, url, ticker.code, exc)
                continue
            rows = payload.get("data") if isinstance(payload, dict) else None
            events = normalize_rows(QuoteSnapshotRow, _as_list(rows))
            if events:
                return events
        return []


class FundPageDividendSource(_EastMoneyDividendSource):
    name = "fund-page"

    def applies_to(self, ticker: TickerIdentifier) -> bool:
        return ticker.is_likely_fund

    async def _fetch_events(self, ticker: TickerIdentifier) -> list[DividendEvent]:
        response = await self._get(FUND_PAGE_URL.format(code=ticker.code), self._identity.fund_referer)
        if response is None:
            return []
        return parse_fund_dividend_page(response.text)


def default_dividend_sources(
    client: httpx.AsyncClient, identity: ProviderIdentity = DEFAULT_IDENTITY
) -> list[IDividendSource]:
    """The four sources in priority order."""
    return [
        DataCenterDividendSource(client, identity),
        F10BonusDividendSource(client, identity),
        EtfQuoteDividendSource(client, identity),
        FundPageDividendSource(client, identity),
    ]

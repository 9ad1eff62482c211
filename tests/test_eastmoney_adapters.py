import asyncio
from datetime import date

import httpx
import pytest

from src.application.services.dividend_aggregator import DividendAggregator
from src.application.services.ticker_resolver import resolve_ticker
from src.domain.errors import NoData, UpstreamUnavailable
from src.infrastructure.stock_data.eastmoney_dividend_sources import (
    DataCenterDividendSource,
    EtfQuoteDividendSource,
    F10BonusDividendSource,
    FundPageDividendSource,
    _EastMoneyDividendSource,
    default_dividend_sources,
)
from src.infrastructure.stock_data.eastmoney_kline_adapter import EastMoneyPriceHistoryProvider, parse_kline
from src.infrastructure.stock_data.eastmoney_rows import _SourceRow


def _run(make_call, handler):
    """Run make_call(client) against a client whose transport is *handler*."""

    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await make_call(client)

    return asyncio.run(go())


# ---------------------------------------------------------------------------
# K-line
# ---------------------------------------------------------------------------

KLINES = [
    "2001-08-27,5.39,5.49,5.66,5.30,406318,1410347000.00,6.72,0.18,0.01,56.83",
    "2001-08-28,5.45,5.72,5.74,5.43,129647,463463000.00,5.65,4.19,0.23,18.13",
]


def test_kline_parsed_in_source_order_with_identity_headers():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["headers"] = request.headers
        return httpx.Response(200, json={"rc": 0, "data": {"name": "贵州茅台", "klines": KLINES}})

    history = _run(
        lambda c: EastMoneyPriceHistoryProvider(c).get_price_history(resolve_ticker("600519")), handler
    )

    assert history.name == "贵州茅台"
    assert [b.date for b in history.bars] == [date(2001, 8, 27), date(2001, 8, 28)]
    assert history.bars[0].close == 5.49
    assert history.bars[0].volume == 406318
    assert seen["params"]["secid"] == "1.600519"
    assert seen["params"]["fqt"] == "1"
    assert seen["params"]["lmt"] == "100000"
    assert "Mozilla" in seen["headers"]["user-agent"]
    assert seen["headers"]["referer"] == "https://quote.eastmoney.com/"


def test_kline_non_success_status_is_upstream_unavailable():
    with pytest.raises(UpstreamUnavailable):
        _run(
            lambda c: EastMoneyPriceHistoryProvider(c).get_price_history(resolve_ticker("600519")),
            lambda request: httpx.Response(502),
        )


def test_kline_timeout_is_upstream_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamUnavailable):
        _run(lambda c: EastMoneyPriceHistoryProvider(c).get_price_history(resolve_ticker("000001")), handler)


def test_kline_non_json_body_is_upstream_unavailable():
    with pytest.raises(UpstreamUnavailable):
        _run(
            lambda c: EastMoneyPriceHistoryProvider(c).get_price_history(resolve_ticker("600519")),
            lambda request: httpx.Response(200, text="<html>"),
        )


@pytest.mark.parametrize("payload", [{"rc": 0, "data": None}, {"data": {"klines": []}}])
def test_kline_without_bars_is_no_data(payload):
    with pytest.raises(NoData):
        _run(
            lambda c: EastMoneyPriceHistoryProvider(c).get_price_history(resolve_ticker("000001")),
            lambda request: httpx.Response(200, json=payload),
        )


def test_parse_kline_rejects_malformed_lines():
    assert parse_kline("2020-01-02,1,2") is None
    assert parse_kline("not-a-date,1,2,3,4,5") is None
    assert parse_kline("2020-01-02,1,2,3,4,-").volume == 0


# ---------------------------------------------------------------------------
# Dividend sources
# ---------------------------------------------------------------------------


def test_datacenter_rows_filtered_individually():
    rows = [
        {"SECURITY_CODE": "600519", "CASH_PER_SHARE": 30.876, "EX_DIVIDEND_DATE": "2024-06-19 00:00:00"},
        {"SECURITY_CODE": "600519", "CASH_PER_SHARE": 0, "EX_DIVIDEND_DATE": "2023-06-30 00:00:00"},
        {"SECURITY_CODE": "600519", "CASH_PER_SHARE": "2.5", "EX_DIVIDEND_DATE": None, "NOTICE_DATE": "2022-12-01"},
        {"SECURITY_CODE": "600519", "CASH_PER_SHARE": "x", "EX_DIVIDEND_DATE": "2021-06-30"},
        {"SECURITY_CODE": "600519", "CASH_PER_SHARE": 1.0, "EX_DIVIDEND_DATE": "bad"},
    ]
    seen = {}

    def handler(request):
        seen["filter"] = request.url.params["filter"]
        return httpx.Response(200, json={"result": {"data": rows}, "success": True})

    events = _run(lambda c: DataCenterDividendSource(c).fetch(resolve_ticker("600519")), handler)

    assert seen["filter"] == "(SECURITY_CODE='600519')"
    assert [(e.year, e.cash_per_share) for e in events] == [(2024, 30.876), (2022, 2.5)]
    assert events[0].ex_date == date(2024, 6, 19)


def test_f10_prefers_plan_profile_rows():
    payload = {
        "fhyx": [
            {"IMPL_PLAN_PROFILE": "10派3.75元", "EX_DIVIDEND_DATE": "2023-07-10 00:00:00"},
            {"IMPL_PLAN_PROFILE": "不分配不转增", "NOTICE_DATE": "2022-04-01"},
            {"IMPL_PLAN_PROFILE": "10派2元", "EX_DIVIDEND_DATE": None, "NOTICE_DATE": "2022-05-20"},
        ],
        "sgbh": [{"f03": 9.9, "f01": "2010"}],
    }
    seen = {}

    def handler(request):
        seen["code"] = request.url.params["code"]
        return httpx.Response(200, json=payload)

    events = _run(lambda c: F10BonusDividendSource(c).fetch(resolve_ticker("000001")), handler)

    assert seen["code"] == "SZ000001"
    assert [(e.year, e.cash_per_share) for e in events] == [(2023, pytest.approx(0.375)), (2022, 0.2)]


def test_f10_falls_back_to_legacy_rows():
    payload = {
        "fhyx": [{"IMPL_PLAN_PROFILE": "不分配"}],
        "data": {"sgbh": {"data": [{"f03": "0.35", "f01": "2015-06-01"}, {"cash": 0.1, "year": 1985}]}},
    }
    events = _run(
        lambda c: F10BonusDividendSource(c).fetch(resolve_ticker("600000")),
        lambda request: httpx.Response(200, json=payload),
    )
    assert [(e.year, e.cash_per_share) for e in events] == [(2015, 0.35)]


def test_etf_quote_source_reads_jsonp_from_second_endpoint():
    def handler(request):
        if request.url.host == "push2.eastmoney.com":
            return httpx.Response(200, text='{"rc": 0, "data": null}')
        body = 'cb({"data": [{"CASH_PER_SHARE": "0.052", "EX_DIVIDEND_DATE": "2024-01-18"}]})'
        return httpx.Response(200, text=body)

    source = EtfQuoteDividendSource(None)
    assert not source.applies_to(resolve_ticker("600519"))
    events = _run(lambda c: EtfQuoteDividendSource(c).fetch(resolve_ticker("510300")), handler)
    assert [(e.year, e.cash_per_share) for e in events] == [(2024, 0.052)]


def test_fund_page_source_scrapes_html():
    html = "| 2024年 | 2024-01-15 | 2024-01-16 | 每份派现金0.0690元 | 2024-01-19 |"

    def handler(request):
        assert request.url.path == "/fhsp_510300.html"
        return httpx.Response(200, text=html)

    events = _run(lambda c: FundPageDividendSource(c).fetch(resolve_ticker("510300")), handler)
    assert [(e.year, e.cash_per_share) for e in events] == [(2024, 0.069)]


@pytest.mark.parametrize(
    "source_type",
    [DataCenterDividendSource, F10BonusDividendSource, EtfQuoteDividendSource, FundPageDividendSource],
)
def test_sources_swallow_failures(source_type):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    assert _run(lambda c: source_type(c).fetch(resolve_ticker("159915")), handler) == []
    assert _run(lambda c: source_type(c).fetch(resolve_ticker("159915")), lambda r: httpx.Response(500)) == []
    assert _run(
        lambda c: source_type(c).fetch(resolve_ticker("159915")),
        lambda r: httpx.Response(200, text="<html>not json</html>"),
    ) == []


def test_chain_with_every_source_unreachable_is_empty():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    async def call(client):
        aggregator = DividendAggregator(default_dividend_sources(client))
        return await aggregator.collect(resolve_ticker("510300"))

    assert _run(call, handler) == []


def test_chain_only_reaches_fund_sources_after_stock_sources_fail():
    hosts = []

    def handler(request):
        hosts.append(request.url.host)
        if request.url.host == "fundf10.eastmoney.com":
            return httpx.Response(200, text="| 2023年 | 2023-05-10 | 2023-05-11 | 每份派现金0.0300元 | 2023-05-16 |")
        return httpx.Response(200, json={"data": []})

    async def call(client):
        return await DividendAggregator(default_dividend_sources(client)).collect(resolve_ticker("159915"))

    events = _run(call, handler)
    assert [(e.year, e.cash_per_share) for e in events] == [(2023, 0.03)]
    assert hosts[0] == "datacenter-web.eastmoney.com"
    assert hosts[-1] == "fundf10.eastmoney.com"


def test_source_and_row_bases_are_abstract():
    with pytest.raises(TypeError):
        _EastMoneyDividendSource(None)
    assert _EastMoneyDividendSource.__abstractmethods__ == frozenset({"_fetch_events"})
    assert _SourceRow.__abstractmethods__ == frozenset({"to_event"})

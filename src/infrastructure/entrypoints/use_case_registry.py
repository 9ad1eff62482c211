"""
Composition helpers shared by the entrypoints.

Binds the EastMoney adapters to the application use-cases so each entrypoint
only has to own the lifetime of the httpx.AsyncClient.
"""

from dataclasses import dataclass

import httpx

from src.application.services.dividend_aggregator import DividendAggregator
from src.application.use_cases.analyze_stock import AnalyzeStockUseCase
from src.application.use_cases.simulate_investment import SimulateInvestmentUseCase
from src.infrastructure.stock_data.eastmoney_dividend_sources import default_dividend_sources
from src.infrastructure.stock_data.eastmoney_http import DEFAULT_IDENTITY, ProviderIdentity
from src.infrastructure.stock_data.eastmoney_kline_adapter import EastMoneyPriceHistoryProvider


@dataclass(frozen=True)
class UseCases:
    analyze: AnalyzeStockUseCase
    simulate: SimulateInvestmentUseCase


def create_use_cases(
    client: httpx.AsyncClient,
    identity: ProviderIdentity = DEFAULT_IDENTITY,
) -> UseCases:
    """Wire the price provider and the dividend source chain into the use-cases.

    Args:
        client:   Shared AsyncClient; its timeout applies to every outbound call.
        identity: Outbound User-Agent / Referer constants.
    """
    analyze = AnalyzeStockUseCase(
        prices=EastMoneyPriceHistoryProvider(client, identity),
        dividends=DividendAggregator(default_dividend_sources(client, identity)),
    )
    return UseCases(analyze=analyze, simulate=SimulateInvestmentUseCase(analyze))

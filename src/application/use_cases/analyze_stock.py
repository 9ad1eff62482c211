"""
Use-case: full dividend & growth analysis for a user-supplied stock code.
Depends only on Domain ports, entities and application services; no infrastructure imports.
"""

import logging

from src.application.services.dividend_aggregator import DividendAggregator
from src.application.services.ticker_resolver import resolve_ticker
from src.application.services.yearly_metrics import build_analysis
from src.domain.entities.analysis import AnalysisResult
from src.domain.ports.stock_data_port import IPriceHistoryProvider

log = logging.getLogger(__name__)


class AnalyzeStockUseCase:
    def __init__(self, prices: IPriceHistoryProvider, dividends: DividendAggregator) -> None:
        self._prices = prices
        self._dividends = dividends

    async def execute(self, symbol: str) -> AnalysisResult:
        """Resolve *symbol*, fetch prices then dividends, and derive yearly metrics.

        Raises:
            InvalidTicker:       if *symbol* is not a recognised A-share code.
            UpstreamUnavailable: if the price history could not be fetched.
            NoData:              if the provider has no bars for the security.
        """
        ticker = resolve_ticker(symbol)
        history = await self._prices.get_price_history(ticker)
        log.info("Fetched %d bars for %s", len(history.bars), ticker.secid)
        events = await self._dividends.collect(ticker)
        return build_analysis(history, events)

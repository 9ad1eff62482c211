"""
Port (interface) for price history providers.
Infrastructure adapters (e.g. EastMoneyPriceHistoryProvider) must implement this interface.
"""

from abc import ABC, abstractmethod

from src.domain.entities.stock_price import PriceHistory
from src.domain.entities.ticker import TickerIdentifier


class IPriceHistoryProvider(ABC):
    @abstractmethod
    async def get_price_history(self, ticker: TickerIdentifier) -> PriceHistory:
        """Return the full daily forward-adjusted history, earliest bar first.

        Raises:
            UpstreamUnavailable: on transport failure, timeout or a non-success status.
            NoData: if the provider returned no bars.
        """
        ...

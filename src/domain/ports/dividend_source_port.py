"""
Port (interface) for dividend record sources.
Infrastructure adapters (e.g. DataCenterDividendSource) must implement this interface.
"""

from abc import ABC, abstractmethod

from src.domain.entities.dividend import DividendEvent
from src.domain.entities.ticker import TickerIdentifier


class IDividendSource(ABC):
    name: str = "unknown"

    def applies_to(self, ticker: TickerIdentifier) -> bool:
        """Whether this source should be queried for *ticker* at all."""
        return True

    @abstractmethod
    async def fetch(self, ticker: TickerIdentifier) -> list[DividendEvent]:
        """Return normalized dividend events for *ticker*.

        Must never raise: any network or parse failure is reported as an
        empty list so the next source in the chain can be tried.
        """
        ...

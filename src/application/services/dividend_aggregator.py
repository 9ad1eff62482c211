"""
Application service: obtain dividend events from a priority-ordered source chain.

Sources are tried in order and the first one that yields at least one event
wins; results from different sources are never merged. Sources whose
applies_to() rejects the ticker are skipped. The aggregator never raises:
worst case it returns an empty list.
"""

import logging

from src.domain.entities.dividend import DividendEvent
from src.domain.entities.ticker import TickerIdentifier
from src.domain.ports.dividend_source_port import IDividendSource

log = logging.getLogger(__name__)


class DividendAggregator:
    def __init__(self, sources: list[IDividendSource]) -> None:
        self._sources = list(sources)

    async def collect(self, ticker: TickerIdentifier) -> list[DividendEvent]:
        for source in self._sources:
            if not source.applies_to(ticker):
                continue
            try:
                events = await source.fetch(ticker)
            except Exception as exc:
                # Sources are expected to swallow their own failures.
                log.warning("Dividend source %s raised for %s: %s", source.name, ticker.code, exc)
                continue
            if events:
                log.info("Dividends for %s: %d events from %s", ticker.code, len(events), source.name)
                return list(events)
            log.debug("Dividend source %s returned nothing for %s", source.name, ticker.code)
        log.info("No dividend data for %s", ticker.code)
        return []

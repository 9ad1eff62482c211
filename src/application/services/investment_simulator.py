"""
Application service: project a buy-and-hold investment over a yearly series.

The simulation buys at the first year with a positive start price, collects
each year's dividend on the shares held and, when reinvesting, converts it
into new shares at that year's closing price.
"""

import logging
import math
from datetime import date
from typing import Optional

from src.application.services.yearly_metrics import (
    DAYS_PER_YEAR,
    compound_annual_growth_percent,
    round2,
)
from src.domain.entities.analysis import SimulationResult, YearlyRecord

log = logging.getLogger(__name__)


def simulate_investment(
    records: list[YearlyRecord],
    principal: float,
    reinvest: bool,
    end_date: date,
) -> Optional[SimulationResult]:
    """Simulate investing *principal* and holding until *end_date*.

    Args:
        records:   Yearly records in ascending year order.
        principal: Amount invested on the entry date.
        reinvest:  Buy more shares with each dividend instead of keeping cash.
        end_date:  Last date of the price series; end of the holding period.

    Returns:
        The simulation outcome, or None when it cannot be simulated
        (non-finite or non-positive principal, no usable entry price, or no closing price).
    """
    if not math.isfinite(principal) or principal <= 0:
        return None
    entry_index = next(
        (i for i, record in enumerate(records) if record.year_start_price > 0), None
    )
    if entry_index is None:
        log.debug("No year with a positive start price; cannot simulate")
        return None

    held = records[entry_index:]
    entry = held[0]
    buy_price = entry.year_start_price
    final_price = next((r.year_end_price for r in reversed(held) if r.year_end_price > 0), 0.0)
    if final_price <= 0:
        return None

    initial_shares = principal / buy_price
    shares = initial_shares
    cash_received = 0.0
    for record in held:
        cash = shares * record.total_dividend
        if reinvest and record.year_end_price > 0:
            shares += cash / record.year_end_price
        else:
            cash_received += cash

    end_value = shares * final_price
    terminal_value = end_value + cash_received
    total_return = terminal_value - principal
    years = (end_date - date(entry.year, 1, 1)).days / DAYS_PER_YEAR

    return SimulationResult(
        buy_year=entry.year,
        buy_price=buy_price,
        principal=principal,
        reinvest=reinvest,
        shares=round2(initial_shares),
        final_shares=round2(shares),
        final_price=final_price,
        end_value=round2(end_value),
        cash_received=round2(cash_received),
        terminal_value=round2(terminal_value),
        total_return=round2(total_return),
        total_return_percent=round2(total_return / principal * 100),
        years=round2(years),
        cagr_percent=round2(compound_annual_growth_percent(principal, terminal_value, years)),
    )

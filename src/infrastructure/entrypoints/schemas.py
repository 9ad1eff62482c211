"""
HTTP response models. Fields are built from domain entities by name and
serialized in camelCase.
"""

from datetime import date
from typing import Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=AliasGenerator(serialization_alias=to_camel),
        from_attributes=True,
    )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class YearlyRecordOut(_CamelModel):
    year: int
    total_dividend: float
    dividend_yield_percent: float
    growth_rate_percent: float
    year_start_price: float
    year_end_price: float


class AnalysisResponse(_CamelModel):
    symbol: str
    name: Optional[str] = None
    start_date: date
    end_date: date
    start_price: float
    end_price: float
    years: float
    cagr_percent: float
    yearly_records: list[YearlyRecordOut]
    has_dividends: bool
    error: Optional[str] = None


class SimulationOut(_CamelModel):
    buy_year: int
    buy_price: float
    principal: float
    reinvest: bool
    shares: float
    final_shares: float
    final_price: float
    end_value: float
    cash_received: float
    terminal_value: float
    total_return: float
    total_return_percent: float
    years: float
    cagr_percent: float


class SimulationResponse(_CamelModel):
    symbol: str
    name: Optional[str] = None
    end_date: date
    simulation: SimulationOut


class ErrorResponse(_CamelModel):
    symbol: str
    error: str

"""
Source-specific row shapes for EastMoney dividend payloads.

Each endpoint names its fields differently; every shape is an explicit
pydantic model (AliasChoices lists the names seen in the wild) with its own
to_event() adapter onto the canonical DividendEvent. Rows that fail
validation or the amount/year checks are dropped one by one; a bad row never
discards the rest of the batch.
"""

import logging
from abc import abstractmethod
from typing import Any, Iterable, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from src.domain.entities.dividend import DividendEvent
from src.infrastructure.stock_data.eastmoney_parsing import (
    parse_cash_per_share_from_profile,
    parse_date,
    parse_year,
    positive_amount,
)

log = logging.getLogger(__name__)


class _SourceRow(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @abstractmethod
    def to_event(self) -> Optional[DividendEvent]:
        ...


def _event(amount: Any, raw_date: Any) -> Optional[DividendEvent]:
    cash = positive_amount(amount)
    year = parse_year(raw_date)
    if cash is None or year is None:
        return None
    return DividendEvent(year=year, cash_per_share=cash, ex_date=parse_date(raw_date))


class DataCenterBonusRow(_SourceRow):
    """RPT_SHAREBONUS_DET row from the data-center query API."""

    security_code: Optional[str] = Field(default=None, validation_alias="SECURITY_CODE")
    cash_per_share: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("CASH_PER_SHARE", "cashPerShare")
    )
    ex_dividend_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("EX_DIVIDEND_DATE", "exDividendDate")
    )
    notice_date: Optional[str] = Field(default=None, validation_alias="NOTICE_DATE")
    report_date: Optional[str] = Field(default=None, validation_alias="REPORT_DATE")

    def to_event(self) -> Optional[DividendEvent]:
        raw_date = self.ex_dividend_date or self.notice_date or self.report_date
        return _event(self.cash_per_share, raw_date)


class F10PlanRow(_SourceRow):
    """``fhyx`` implementation-plan row; the amount lives in the profile text."""

    impl_plan_profile: Optional[str] = Field(default=None, validation_alias="IMPL_PLAN_PROFILE")
    ex_dividend_date: Optional[str] = Field(default=None, validation_alias="EX_DIVIDEND_DATE")
    notice_date: Optional[str] = Field(default=None, validation_alias="NOTICE_DATE")

    def to_event(self) -> Optional[DividendEvent]:
        return _event(
            parse_cash_per_share_from_profile(self.impl_plan_profile),
            self.ex_dividend_date or self.notice_date,
        )


class F10LegacyBonusRow(_SourceRow):
    """Older ``sgbh`` row shape with positional or Chinese field names."""

    cash: Optional[float] = Field(default=None, validation_alias=AliasChoices("f03", "cash", "每股派息"))
    year: Optional[Union[int, str]] = Field(
        default=None, validation_alias=AliasChoices("f01", "year", "公告日期")
    )

    def to_event(self) -> Optional[DividendEvent]:
        return _event(self.cash, self.year)


class QuoteSnapshotRow(_SourceRow):
    """Row of the quote-snapshot / fund-archive APIs tried for ETFs."""

    cash: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("CASH_PER_SHARE", "cashPerShare", "f03")
    )
    ex_date: Optional[Union[int, str]] = Field(
        default=None, validation_alias=AliasChoices("EX_DIVIDEND_DATE", "exDate", "f01")
    )

    def to_event(self) -> Optional[DividendEvent]:
        return _event(self.cash, self.ex_date)


def normalize_rows(row_type: type[_SourceRow], rows: Iterable[Any]) -> list[DividendEvent]:
    """Validate *rows* as *row_type* and keep the ones that convert to an event."""
    events = []
    for raw in rows:
        if not isinstance(raw, dict):
            continue
        try:
            row = row_type.model_validate(raw)
        except ValidationError as exc:
            log.debug("Dropping malformed %s: %s", row_type.__name__, exc.errors()[:1])
            continue
        event = row.to_event()
        if event is not None:
            events.append(event)
    return events

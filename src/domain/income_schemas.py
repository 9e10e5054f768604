from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.models import IncomeFrequency, IncomePattern, PaydayFrequency


class IncomeTransaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    posted_on: date
    payee: str
    amount: int = Field(description="Signed amount in cents. Deposits are positive.")
    is_transfer: bool = False


class DateWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: date = Field(description="Start date in YYYY-MM-DD format, e.g. 2026-01-31.")
    end: date = Field(description="End date in YYYY-MM-DD format, e.g. 2026-01-31.")

    @field_validator("start", "end", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        if isinstance(value, date) or not isinstance(value, str):
            return value

        text = value.strip()
        if not text:
            return value

        for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%m-%d-%Y"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "DateWindow":
        if self.start > self.end:
            raise ValueError("window start must be <= window end")
        return self


class PaydayPattern(BaseModel):
    """
    A recurring deposit detected for one payer.

    `day_of_week` follows `date.weekday()` (Monday is 0).
    """

    model_config = ConfigDict(frozen=True)

    payee: str
    frequency: PaydayFrequency
    interval_days: Optional[int] = None
    day_of_week: Optional[int] = None
    day_of_month: Optional[int] = None
    days_of_month: List[int] = Field(default_factory=list)
    average_amount: int
    confidence: float = Field(ge=0, le=1)
    occurrences: int
    last_occurrence: date


class PaydayPrediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    pay_date: date
    expected_amount: int
    days_until: int


class IncomeStream(BaseModel):
    model_config = ConfigDict(frozen=True)

    payee: str
    average_amount: int
    total_amount: int
    frequency: IncomeFrequency
    pattern: IncomePattern
    occurrences: int
    amount_variance: float
    last_seen: date


class IncomeEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_estimate: int
    total_income: int
    months_spanned: int
    sample_count: int
    confidence: float
    window: Optional[DateWindow] = None
    streams: List[IncomeStream] = Field(default_factory=list)

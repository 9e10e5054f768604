from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.models import Compounding, PayoffStrategy


class Debt(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    balance: int = Field(description="Amount owed in cents.")
    interest_rate: int = Field(ge=0, description="APR in basis points (1800 = 18.00%).")
    minimum_payment: int = Field(ge=0, description="Minimum monthly payment in cents.")
    compounding: Compounding = Compounding.MONTHLY


class PayoffScheduleEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int = Field(description="1-based month number of the plan.")
    debt_id: str
    debt_name: str
    payment: int
    principal: int
    interest: int
    remaining_balance: int


class DebtPayoffResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy: PayoffStrategy
    schedule: List[PayoffScheduleEntry] = Field(default_factory=list)
    total_months: int
    total_paid: int
    total_interest: int
    debt_free_month: Optional[str] = Field(default=None, description="Projected YYYY-MM, None when never paid off.")


class AmortizationEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int
    payment: int
    principal: int
    interest: int
    remaining_balance: int


class PayoffProjection(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_months: int
    debt_free_month: Optional[str] = None

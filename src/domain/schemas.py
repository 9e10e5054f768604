from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.models import AccountType, GoalStatus, TargetType
from engine.money import RATE_PRECISION, rate_to_fixed

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---- tool envelope ----

class ToolContext(BaseModel):
    user_id: str = "u_local"
    ledger_id: str = "ldg_main"
    timezone: str = "UTC"
    base_currency: str = "USD"


class ToolRequest(BaseModel):
    request_id: str
    tool: str
    args: Dict[str, Any] = Field(default_factory=dict)
    context: ToolContext = Field(default_factory=ToolContext)


class ToolResponse(BaseModel):
    request_id: str
    tool: str
    ok: bool = True
    result: Dict[str, Any] = Field(default_factory=dict)
    errors: List[str] = Field(default_factory=list)
    context: ToolContext


class ToolCall(BaseModel):
    id: str
    tool: str
    args: Dict[str, Any] = Field(default_factory=dict)


class BatchRequest(BaseModel):
    request_id: str
    context: ToolContext = Field(default_factory=ToolContext)
    calls: List[ToolCall] = Field(default_factory=list)


class ToolInvocation(BaseModel):
    """Body of a single tool call over HTTP; the tool name comes from the path."""

    request_id: str = "req_api"
    args: Dict[str, Any] = Field(default_factory=dict)
    context: Optional[ToolContext] = None


# ---- envelope budget ----

class CategoryInput(_Frozen):
    category_id: str
    name: str
    emoji: Optional[str] = None
    target_amount: Optional[int] = None
    target_type: Optional[TargetType] = None


class CategoryGroupInput(_Frozen):
    group_id: str
    name: str
    categories: List[CategoryInput] = Field(default_factory=list)


class MonthBudgetInput(_Frozen):
    """
    Everything needed to compute one month of the envelope budget.

    The caller queries storage for the month and hands over plain maps keyed by
    category id. A category missing from `allocations`, `activity` or
    `carry_forwards` simply has nothing recorded for it.
    """

    month: str = Field(pattern=MONTH_PATTERN, description="Budget month in YYYY-MM format.")
    groups: List[CategoryGroupInput] = Field(default_factory=list)
    allocations: Dict[str, int] = Field(default_factory=dict)
    activity: Dict[str, int] = Field(
        default_factory=dict,
        description="Net transaction activity per category. Negative = spend, positive = refund/inflow.",
    )
    carry_forwards: Dict[str, int] = Field(default_factory=dict)
    total_income: int = 0
    overspent_last_month: int = 0


class CategoryBudgetState(_Frozen):
    category_id: str
    group_id: str
    name: str
    emoji: Optional[str] = None
    allocated: int
    activity: int
    carry_forward: int
    available: int
    target_amount: Optional[int] = None
    target_type: Optional[TargetType] = None
    target_progress: Optional[int] = None


class GroupBudgetState(_Frozen):
    group_id: str
    name: str
    allocated: int
    activity: int
    available: int
    categories: List[CategoryBudgetState] = Field(default_factory=list)


class MonthBudgetState(_Frozen):
    month: str
    total_income: int
    total_allocated: int
    total_activity: int
    total_overspent: int
    ready_to_assign: int
    groups: List[GroupBudgetState] = Field(default_factory=list)


class AllocationMove(_Frozen):
    from_category_id: str
    to_category_id: str
    from_delta: int
    to_delta: int


class RolloverRecord(_Frozen):
    category_id: str
    from_month: str
    to_month: str
    amount: int


# ---- goals ----

class Goal(_Frozen):
    id: str
    name: str
    target_amount: int
    current_amount: int = 0
    target_date: Optional[date] = None
    created_date: Optional[date] = None
    monthly_contribution: int = 0
    category_id: Optional[str] = None


class GoalProgress(_Frozen):
    current_amount: int
    target_amount: int
    percentage: int
    remaining: int


class GoalProjection(_Frozen):
    projected_date: Optional[date] = None
    months_remaining: Optional[int] = None
    meets_target_date: Optional[bool] = None


class GoalReport(_Frozen):
    goal_id: str
    name: str
    progress: GoalProgress
    status: GoalStatus
    suggested_monthly_contribution: Optional[int] = None
    projection: GoalProjection


# ---- net worth ----

class Account(_Frozen):
    id: str
    name: str
    type: AccountType
    balance: int
    is_active: bool = True


class AccountBreakdownLine(_Frozen):
    account_id: str
    account_name: str
    type: AccountType
    balance: int
    is_asset: bool


class NetWorthResult(_Frozen):
    assets: int
    liabilities: int
    net_worth: int
    account_breakdown: List[AccountBreakdownLine] = Field(default_factory=list)


class AccountBalanceEntry(_Frozen):
    """One element of the JSON array persisted in `NetWorthSnapshot.account_balances`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)
    id: str
    balance: int
    is_asset: bool = Field(alias="isAsset")


class NetWorthSnapshot(_Frozen):
    id: str
    month: str = Field(pattern=MONTH_PATTERN)
    assets: int
    liabilities: int
    net_worth: int
    account_balances: Optional[str] = None
    created_at: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_net_worth(self) -> "NetWorthSnapshot":
        if self.net_worth != self.assets - self.liabilities:
            raise ValueError("net_worth must equal assets - liabilities")
        return self


class NetWorthTimelinePoint(_Frozen):
    month: str
    assets: int
    liabilities: int
    net_worth: int


# ---- currencies ----

class CurrencyInfo(_Frozen):
    code: str = Field(min_length=3, max_length=3)
    name: str
    symbol: str
    decimal_places: int = Field(default=2, ge=0)
    is_base: bool = False


class ExchangeRate(_Frozen):
    """
    Conversion rate from one currency to another.

    `rate` is the fixed-point integer (`rate_decimal * RATE_PRECISION`) used for
    arithmetic; `rate_decimal` is the exact text shown to the user.
    """

    from_currency: str = Field(min_length=3, max_length=3)
    to_currency: str = Field(min_length=3, max_length=3)
    rate: int = Field(gt=0)
    rate_decimal: str

    @field_validator("rate_decimal")
    @classmethod
    def validate_decimal_text(cls, value: str) -> str:
        text = value.strip()
        try:
            parsed = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"rate_decimal is not a decimal number: {value!r}") from exc
        if not parsed.is_finite() or parsed <= 0:
            raise ValueError("rate_decimal must be a positive finite number")
        return text

    @model_validator(mode="after")
    def validate_fixed_point(self) -> "ExchangeRate":
        expected = rate_to_fixed(self.rate_decimal)
        if self.rate != expected:
            raise ValueError(
                f"rate {self.rate} does not match rate_decimal {self.rate_decimal!r} "
                f"at precision {RATE_PRECISION} (expected {expected})"
            )
        return self

    @classmethod
    def from_decimal(cls, from_currency: str, to_currency: str, rate_decimal: str) -> "ExchangeRate":
        return cls(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate_to_fixed(rate_decimal),
            rate_decimal=rate_decimal,
        )

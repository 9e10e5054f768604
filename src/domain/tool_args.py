from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.debt_schemas import Debt
from domain.income_schemas import DateWindow, IncomeTransaction
from domain.models import PayoffStrategy
from domain.report_schemas import (
    AlertConfig,
    AlertHistoryEntry,
    ReportCategory,
    SpendingTransaction,
    TransactionSplit,
)
from domain.schemas import (
    MONTH_PATTERN,
    Account,
    CurrencyInfo,
    ExchangeRate,
    Goal,
    MonthBudgetInput,
    NetWorthSnapshot,
)
from domain.subscription_schemas import Subscription


class ToolArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TodayArgs(ToolArgs):
    today: Optional[date] = Field(
        default=None,
        description="Reference date in YYYY-MM-DD format. Defaults to today in the context timezone.",
    )


class MonthStateArgs(ToolArgs):
    budget: MonthBudgetInput


class RolloverArgs(ToolArgs):
    budget: MonthBudgetInput
    next_allocations: Dict[str, int] = Field(
        default_factory=dict,
        description="Allocations already made in the following month; rollovers are added on top.",
    )


class SubscriptionSummaryArgs(ToolArgs):
    subscriptions: List[Subscription] = Field(default_factory=list)


class UpcomingRenewalsArgs(TodayArgs):
    subscriptions: List[Subscription] = Field(default_factory=list)
    days_ahead: int = Field(default=30, ge=0, le=366)


class GoalsReportArgs(TodayArgs):
    goals: List[Goal] = Field(default_factory=list)


class NetWorthArgs(ToolArgs):
    accounts: List[Account] = Field(default_factory=list)


class NetWorthSnapshotArgs(NetWorthArgs):
    month: str = Field(pattern=MONTH_PATTERN, description="Snapshot month in YYYY-MM format.")
    snapshot_id: Optional[str] = None
    created_at: Optional[datetime] = None


class NetWorthTimelineArgs(ToolArgs):
    snapshots: List[NetWorthSnapshot] = Field(default_factory=list)


class PaydaysArgs(TodayArgs):
    transactions: List[IncomeTransaction] = Field(default_factory=list)


class IncomeEstimateArgs(ToolArgs):
    transactions: List[IncomeTransaction] = Field(default_factory=list)
    window: Optional[DateWindow] = None


class CurrencyConvertArgs(ToolArgs):
    amount: int = Field(description="Amount in minor units of `from_currency`.")
    from_currency: str = Field(min_length=3, max_length=3)
    to_currency: Optional[str] = Field(
        default=None,
        min_length=3,
        max_length=3,
        description="Target currency. Defaults to the context base currency.",
    )
    rates: List[ExchangeRate] = Field(default_factory=list)
    currencies: List[CurrencyInfo] = Field(default_factory=list)

    @field_validator("from_currency", "to_currency")
    @classmethod
    def upper_code(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if value else value


class BudgetAlertsArgs(ToolArgs):
    budget: MonthBudgetInput
    alerts: List[AlertConfig] = Field(default_factory=list)
    history: List[AlertHistoryEntry] = Field(
        default_factory=list,
        description="Alerts already sent; an alert fires at most once per month.",
    )


class BudgetVsSpentArgs(ToolArgs):
    budget: MonthBudgetInput


class SpendingReportArgs(ToolArgs):
    transactions: List[SpendingTransaction] = Field(default_factory=list)
    splits: List[TransactionSplit] = Field(default_factory=list)
    categories: List[ReportCategory] = Field(default_factory=list)
    window: DateWindow
    top_payees: int = Field(default=10, ge=0, le=100)
    trend_months: int = Field(default=6, ge=0, le=120)


class DebtPayoffArgs(TodayArgs):
    debts: List[Debt] = Field(default_factory=list)
    strategy: PayoffStrategy = PayoffStrategy.AVALANCHE
    extra_payment: int = Field(default=0, ge=0, description="Monthly amount paid on top of the minimums, in cents.")
    include_schedule: bool = False

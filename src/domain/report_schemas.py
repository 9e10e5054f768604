from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.schemas import MONTH_PATTERN

UNCATEGORIZED = "uncategorized"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---- budget alerts ----

class AlertConfig(_Frozen):
    id: str
    category_id: str
    threshold_pct: int = Field(ge=0, description="Fire once spending reaches this percent of the target.")
    is_enabled: bool = True


class AlertHistoryEntry(_Frozen):
    alert_id: str
    category_id: str
    month: str = Field(pattern=MONTH_PATTERN)
    threshold_pct: int
    spent_pct: int
    amount_spent: int
    target_amount: int


class CategorySpendState(_Frozen):
    category_id: str
    name: str
    spent: int = Field(description="Spending in cents as a positive amount.")
    target_amount: int


class AlertNotification(_Frozen):
    alert_id: str
    category_id: str
    category_name: str
    threshold_pct: int
    spent_pct: int
    amount_spent: int
    target_amount: int
    message: str


# ---- spending reports ----

class SpendingTransaction(_Frozen):
    id: str
    posted_on: date
    payee: str
    amount: int = Field(description="Signed amount in cents. Negative = outflow.")
    category_id: Optional[str] = None
    is_transfer: bool = False


class TransactionSplit(_Frozen):
    transaction_id: str
    category_id: Optional[str] = None
    amount: int


class ReportCategory(_Frozen):
    category_id: str
    name: str
    group_id: str = ""
    emoji: Optional[str] = None


class CategorySpending(_Frozen):
    category_id: str
    category_name: str
    emoji: Optional[str] = None
    group_id: str = ""
    total_spent: int
    transaction_count: int
    percent_of_total: int


class MonthlySpendingPoint(_Frozen):
    month: str
    total_spent: int
    total_income: int


class BudgetVsSpentRow(_Frozen):
    category_id: str
    category_name: str
    budgeted: int
    spent: int
    remaining: int
    percent_used: int


class TopPayee(_Frozen):
    payee: str
    total_spent: int
    transaction_count: int


class SpendingReport(_Frozen):
    categories: List[CategorySpending] = Field(default_factory=list)
    top_payees: List[TopPayee] = Field(default_factory=list)
    total_spent: int = 0

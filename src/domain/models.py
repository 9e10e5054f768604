from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    CASH = "cash"
    INVESTMENT = "investment"
    LOAN = "loan"


ASSET_ACCOUNT_TYPES = frozenset(
    {AccountType.CHECKING, AccountType.SAVINGS, AccountType.CASH, AccountType.INVESTMENT}
)
LIABILITY_ACCOUNT_TYPES = frozenset({AccountType.CREDIT_CARD, AccountType.LOAN})


class TargetType(str, Enum):
    MONTHLY = "monthly"
    SAVINGS_GOAL = "savings_goal"


class BillingCycle(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"
    CUSTOM = "custom"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    TRIAL = "trial"
    PAUSED = "paused"
    CANCELLED = "cancelled"


# Statuses whose cost counts toward subscription totals.
BILLABLE_STATUSES = frozenset({SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIAL})


class GoalStatus(str, Enum):
    COMPLETED = "completed"
    ON_TRACK = "on_track"
    BEHIND = "behind"
    OVERDUE = "overdue"


class PaydayFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMI_MONTHLY = "semi_monthly"
    MONTHLY = "monthly"


class IncomeFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMI_MONTHLY = "semi_monthly"
    MONTHLY = "monthly"
    IRREGULAR = "irregular"


class IncomePattern(str, Enum):
    SALARY = "salary"
    FREELANCE = "freelance"
    IRREGULAR = "irregular"


class ReminderType(str, Enum):
    RENEWAL = "renewal"
    TRIAL_EXPIRY = "trial_expiry"


class PayoffStrategy(str, Enum):
    SNOWBALL = "snowball"
    AVALANCHE = "avalanche"


class Compounding(str, Enum):
    MONTHLY = "monthly"
    DAILY = "daily"


@dataclass(frozen=True)
class AmountLookup:
    """
    Read-only view over a key -> cents mapping.

    Storage queries only return rows that exist, so an absent key means
    "nothing recorded" and reads as zero instead of raising.
    """

    _amounts: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_amounts", MappingProxyType(dict(self._amounts)))

    def amount_for(self, key: str) -> int:
        return int(self._amounts.get(key, 0))

    def __contains__(self, key: object) -> bool:
        return key in self._amounts

    def __iter__(self) -> Iterator[str]:
        return iter(self._amounts)

    def __len__(self) -> int:
        return len(self._amounts)

    def total(self) -> int:
        return sum(int(v) for v in self._amounts.values())

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.models import BillingCycle, ReminderType, SubscriptionStatus


class Subscription(BaseModel):
    """
    A recurring charge as stored by the subscriptions screen.

    `custom_days` is meaningful only for the `custom` billing cycle. Records that
    break that rule are still accepted so one corrupt row cannot take down a
    whole summary; the engine treats their cost as zero.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: int
    currency: str = "USD"
    billing_cycle: BillingCycle
    custom_days: Optional[int] = None
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    start_date: date
    next_renewal: Optional[date] = None
    cancelled_date: Optional[date] = None
    trial_end_date: Optional[date] = None
    notify_days: int = Field(default=3, ge=0)
    category_id: Optional[str] = None

    @property
    def has_valid_cycle(self) -> bool:
        if self.billing_cycle == BillingCycle.CUSTOM:
            return self.custom_days is not None and self.custom_days >= 1
        return True


class PriceHistoryEntry(BaseModel):
    """A price the subscription used to have, and the date the next price took over."""

    model_config = ConfigDict(frozen=True)

    id: str
    subscription_id: str
    price: int
    effective_date: date


class CategoryCostSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    category_id: Optional[str] = None
    monthly_cost: int
    count: int


class SubscriptionSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_total: int
    annual_total: int
    daily_cost: int
    active_count: int
    total_count: int
    by_category: List[CategoryCostSummary] = Field(default_factory=list)


class RenewalReminder(BaseModel):
    model_config = ConfigDict(frozen=True)

    subscription_id: str
    type: ReminderType
    scheduled_for: date
    title: str
    body: str

"""
Subscription cost normalization, summaries and the status state machine.

Monthly, annual and daily figures are each rounded straight from the raw
price. Deriving annual from the already-rounded monthly figure would hide a
few cents of drift that downstream displays already account for.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from domain.models import BILLABLE_STATUSES, BillingCycle, SubscriptionStatus
from domain.subscription_schemas import CategoryCostSummary, Subscription, SubscriptionSummary
from engine.money import round_half_up

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = Decimal("365.25")
DAYS_PER_MONTH = Decimal("30.4375")

# (numerator, denominator) pairs; the division happens once, after multiplying by the price.
MONTHLY_FACTORS: dict[BillingCycle, tuple[Decimal, Decimal]] = {
    BillingCycle.WEEKLY: (DAYS_PER_YEAR, Decimal(7 * 12)),
    BillingCycle.MONTHLY: (Decimal(1), Decimal(1)),
    BillingCycle.QUARTERLY: (Decimal(1), Decimal(3)),
    BillingCycle.SEMI_ANNUAL: (Decimal(1), Decimal(6)),
    BillingCycle.ANNUAL: (Decimal(1), Decimal(12)),
}

ANNUAL_FACTORS: dict[BillingCycle, tuple[Decimal, Decimal]] = {
    BillingCycle.WEEKLY: (DAYS_PER_YEAR, Decimal(7)),
    BillingCycle.MONTHLY: (Decimal(12), Decimal(1)),
    BillingCycle.QUARTERLY: (Decimal(4), Decimal(1)),
    BillingCycle.SEMI_ANNUAL: (Decimal(2), Decimal(1)),
    BillingCycle.ANNUAL: (Decimal(1), Decimal(1)),
}

VALID_TRANSITIONS: dict[SubscriptionStatus, tuple[SubscriptionStatus, ...]] = {
    SubscriptionStatus.TRIAL: (SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELLED),
    SubscriptionStatus.ACTIVE: (SubscriptionStatus.PAUSED, SubscriptionStatus.CANCELLED),
    SubscriptionStatus.PAUSED: (SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELLED),
    SubscriptionStatus.CANCELLED: (),
}


class InvalidTransitionError(ValueError):
    pass


def _factor(
    price: int,
    cycle: BillingCycle,
    custom_days: Optional[int],
    table: dict[BillingCycle, tuple[Decimal, Decimal]],
    custom_basis: Decimal,
) -> Optional[tuple[Decimal, Decimal]]:
    cycle = BillingCycle(cycle)
    if cycle != BillingCycle.CUSTOM:
        return table[cycle]
    if custom_days is None or custom_days < 1:
        logger.warning("Custom billing cycle without valid custom_days=%s price=%d; cost treated as 0", custom_days, price)
        return None
    return custom_basis, Decimal(custom_days)


def normalize_to_monthly(price: int, cycle: BillingCycle, custom_days: Optional[int] = None) -> int:
    factor = _factor(price, cycle, custom_days, MONTHLY_FACTORS, DAYS_PER_MONTH)
    if factor is None:
        return 0
    numerator, denominator = factor
    return round_half_up(Decimal(price) * numerator / denominator)


def normalize_to_annual(price: int, cycle: BillingCycle, custom_days: Optional[int] = None) -> int:
    factor = _factor(price, cycle, custom_days, ANNUAL_FACTORS, DAYS_PER_YEAR)
    if factor is None:
        return 0
    numerator, denominator = factor
    return round_half_up(Decimal(price) * numerator / denominator)


def normalize_to_daily(price: int, cycle: BillingCycle, custom_days: Optional[int] = None) -> int:
    factor = _factor(price, cycle, custom_days, ANNUAL_FACTORS, DAYS_PER_YEAR)
    if factor is None:
        return 0
    numerator, denominator = factor
    return round_half_up(Decimal(price) * numerator / (denominator * DAYS_PER_YEAR))


def _category_sort_key(summary: CategoryCostSummary) -> tuple:
    return (-summary.monthly_cost, summary.category_id is None, summary.category_id or "")


def calculate_subscription_summary(subscriptions: Iterable[Subscription]) -> SubscriptionSummary:
    subscriptions = list(subscriptions)
    monthly_total = 0
    annual_total = 0
    active_count = 0
    by_category: dict[Optional[str], dict[str, int]] = defaultdict(lambda: {"monthly_cost": 0, "count": 0})

    for sub in subscriptions:
        if sub.status not in BILLABLE_STATUSES:
            continue
        monthly = normalize_to_monthly(sub.price, sub.billing_cycle, sub.custom_days)
        monthly_total += monthly
        annual_total += normalize_to_annual(sub.price, sub.billing_cycle, sub.custom_days)
        active_count += 1
        entry = by_category[sub.category_id]
        entry["monthly_cost"] += monthly
        entry["count"] += 1

    categories = sorted(
        (CategoryCostSummary(category_id=cat_id, **values) for cat_id, values in by_category.items()),
        key=_category_sort_key,
    )
    logger.debug("Subscription summary billable=%d total=%d monthly_total=%d", active_count, len(subscriptions), monthly_total)
    return SubscriptionSummary(
        monthly_total=monthly_total,
        annual_total=annual_total,
        daily_cost=round_half_up(Decimal(annual_total) / DAYS_PER_YEAR),
        active_count=active_count,
        total_count=len(subscriptions),
        by_category=categories,
    )


def validate_transition(current: SubscriptionStatus, new: SubscriptionStatus) -> bool:
    return SubscriptionStatus(new) in VALID_TRANSITIONS[SubscriptionStatus(current)]


def get_valid_transitions(status: SubscriptionStatus) -> list[SubscriptionStatus]:
    return list(VALID_TRANSITIONS[SubscriptionStatus(status)])


def transition_subscription(subscription: Subscription, new_status: SubscriptionStatus, today: date) -> Subscription:
    new_status = SubscriptionStatus(new_status)
    if not validate_transition(subscription.status, new_status):
        allowed = ", ".join(s.value for s in VALID_TRANSITIONS[subscription.status]) or "none"
        raise InvalidTransitionError(
            f"Invalid transition: '{subscription.status.value}' -> '{new_status.value}'. "
            f"Valid transitions from '{subscription.status.value}': {allowed}."
        )

    update: dict = {"status": new_status}
    if new_status == SubscriptionStatus.CANCELLED:
        update["cancelled_date"] = today
    logger.info("Subscription transition id=%s %s->%s", subscription.id, subscription.status.value, new_status.value)
    return subscription.model_copy(update=update)

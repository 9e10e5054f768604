from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from domain.models import BillingCycle
from domain.subscription_schemas import PriceHistoryEntry, Subscription
from engine.money import round_half_up

CYCLE_DAYS: dict[BillingCycle, Decimal] = {
    BillingCycle.WEEKLY: Decimal(7),
    BillingCycle.MONTHLY: Decimal("30.4375"),
    BillingCycle.QUARTERLY: Decimal("91.3125"),
    BillingCycle.SEMI_ANNUAL: Decimal("182.625"),
    BillingCycle.ANNUAL: Decimal("365.25"),
}


def record_price_change(
    subscription: Subscription,
    new_price: int,
    changed_on: date,
    entry_id: str,
) -> tuple[Subscription, PriceHistoryEntry]:
    """Return the repriced subscription and the history entry keeping the old price."""
    if new_price == subscription.price:
        raise ValueError("New price matches the current price")
    entry = PriceHistoryEntry(
        id=entry_id,
        subscription_id=subscription.id,
        price=subscription.price,
        effective_date=changed_on,
    )
    return subscription.model_copy(update={"price": new_price}), entry


def _cycle_days(subscription: Subscription) -> Optional[Decimal]:
    if subscription.billing_cycle == BillingCycle.CUSTOM:
        return Decimal(subscription.custom_days) if subscription.has_valid_cycle else None
    return CYCLE_DAYS[subscription.billing_cycle]


def get_lifetime_cost(
    subscription: Subscription,
    history: Iterable[PriceHistoryEntry],
    until: date,
) -> int:
    """
    Estimated total paid from `start_date` up to `until`.

    Each history entry closes the segment priced at its old price; the current
    price runs from the last change to `until`.
    """
    cycle_days = _cycle_days(subscription)
    if cycle_days is None:
        return 0

    entries = sorted(
        (e for e in history if e.subscription_id == subscription.id),
        key=lambda e: e.effective_date,
    )
    boundaries = [subscription.start_date] + [e.effective_date for e in entries] + [until]
    prices = [e.price for e in entries] + [subscription.price]

    total = Decimal(0)
    for price, start, end in zip(prices, boundaries, boundaries[1:]):
        days = (min(end, until) - max(start, subscription.start_date)).days
        if days <= 0:
            continue
        total += Decimal(price) * days / cycle_days
    return round_half_up(total)

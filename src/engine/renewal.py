"""
Renewal date arithmetic and reminder scheduling for subscriptions.

Month-based cycles anchor on the start date's day-of-month and clamp to the
end of shorter months: a Jan 31 monthly subscription renews Feb 28, then
Mar 31.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from domain.models import BILLABLE_STATUSES, BillingCycle, ReminderType, SubscriptionStatus
from domain.subscription_schemas import RenewalReminder, Subscription
from engine._dates import add_months

logger = logging.getLogger(__name__)

CYCLE_MONTHS: dict[BillingCycle, int] = {
    BillingCycle.MONTHLY: 1,
    BillingCycle.QUARTERLY: 3,
    BillingCycle.SEMI_ANNUAL: 6,
    BillingCycle.ANNUAL: 12,
}

TRIAL_REMINDER_DAYS = (3, 1)


def _has_cycle_length(cycle: BillingCycle, custom_days: Optional[int]) -> bool:
    return BillingCycle(cycle) != BillingCycle.CUSTOM or (custom_days is not None and custom_days >= 1)


def _advance_once(current: date, cycle: BillingCycle, anchor_day: int, custom_days: Optional[int]) -> date:
    cycle = BillingCycle(cycle)
    if cycle == BillingCycle.WEEKLY:
        return current + timedelta(days=7)
    if cycle == BillingCycle.CUSTOM:
        return current + timedelta(days=custom_days)
    return add_months(current, CYCLE_MONTHS[cycle], anchor_day)


def advance_renewal_date(
    current_renewal: date,
    cycle: BillingCycle,
    custom_days: Optional[int] = None,
    anchor_day: Optional[int] = None,
) -> date:
    if not _has_cycle_length(cycle, custom_days):
        logger.warning("Custom billing cycle without custom_days=%s; renewal date left unchanged", custom_days)
        return current_renewal
    anchor = anchor_day if anchor_day is not None else current_renewal.day
    return _advance_once(current_renewal, cycle, anchor, custom_days)


def calculate_next_renewal(
    start_date: date,
    cycle: BillingCycle,
    today: date,
    custom_days: Optional[int] = None,
) -> date:
    """
    First renewal on or after `today`, counting whole cycles from `start_date`.

    A custom cycle without a usable `custom_days` cannot be advanced and
    returns `start_date`.
    """
    if not _has_cycle_length(cycle, custom_days):
        logger.warning("Custom billing cycle without custom_days=%s; renewal date left unchanged", custom_days)
        return start_date
    anchor_day = start_date.day
    renewal = start_date
    periods = 0
    while renewal < today:
        periods += 1
        if BillingCycle(cycle) in CYCLE_MONTHS:
            # Always count from the start so clamping in short months never drifts the anchor.
            renewal = add_months(start_date, CYCLE_MONTHS[BillingCycle(cycle)] * periods, anchor_day)
        else:
            renewal = _advance_once(renewal, cycle, anchor_day, custom_days)
    return renewal


def get_upcoming_renewals(
    subscriptions: Iterable[Subscription],
    today: date,
    days_ahead: int = 30,
) -> list[Subscription]:
    cutoff = today + timedelta(days=days_ahead)
    upcoming = [
        sub
        for sub in subscriptions
        if sub.status in BILLABLE_STATUSES
        and sub.next_renewal is not None
        and today <= sub.next_renewal <= cutoff
    ]
    return sorted(upcoming, key=lambda s: (s.next_renewal, s.name, s.id))


def _renewal_reminder(sub: Subscription, today: date) -> Optional[RenewalReminder]:
    if sub.status not in BILLABLE_STATUSES or sub.notify_days <= 0 or sub.next_renewal is None:
        return None
    notify_on = sub.next_renewal - timedelta(days=sub.notify_days)
    if notify_on < today:
        return None
    body = (
        f"{sub.name} renews tomorrow."
        if sub.notify_days == 1
        else f"{sub.name} renews in {sub.notify_days} days."
    )
    return RenewalReminder(
        subscription_id=sub.id,
        type=ReminderType.RENEWAL,
        scheduled_for=notify_on,
        title=f"{sub.name} renewing soon",
        body=body,
    )


def _trial_reminders(sub: Subscription, today: date) -> list[RenewalReminder]:
    if sub.status != SubscriptionStatus.TRIAL or sub.trial_end_date is None:
        return []
    reminders = []
    for days_before in TRIAL_REMINDER_DAYS:
        notify_on = sub.trial_end_date - timedelta(days=days_before)
        if notify_on < today:
            continue
        when = "tomorrow" if days_before == 1 else f"in {days_before} days"
        reminders.append(
            RenewalReminder(
                subscription_id=sub.id,
                type=ReminderType.TRIAL_EXPIRY,
                scheduled_for=notify_on,
                title=f"{sub.name} trial ending",
                body=f"Your {sub.name} trial ends {when}.",
            )
        )
    return reminders


def get_renewal_reminders(subscriptions: Iterable[Subscription], today: date) -> list[RenewalReminder]:
    """Reminders that are due today or later. De-duplicating already sent ones is up to the caller."""
    reminders: list[RenewalReminder] = []
    for sub in subscriptions:
        renewal = _renewal_reminder(sub, today)
        if renewal is not None:
            reminders.append(renewal)
        reminders.extend(_trial_reminders(sub, today))
    reminders.sort(key=lambda r: (r.scheduled_for, r.subscription_id, r.type.value))
    logger.debug("Renewal reminders computed count=%d today=%s", len(reminders), today.isoformat())
    return reminders

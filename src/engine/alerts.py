"""Category budget alerts: fire once per month when spending crosses a threshold of the target."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from domain.report_schemas import AlertConfig, AlertHistoryEntry, AlertNotification, CategorySpendState
from domain.schemas import MonthBudgetState
from engine.money import round_half_up

logger = logging.getLogger(__name__)


def spent_percentage(spent: int, target: int) -> int:
    if target <= 0:
        return 0
    return round_half_up(Decimal(spent) * 100 / Decimal(target))


def category_spend_states(state: MonthBudgetState) -> list[CategorySpendState]:
    """Spending per category of a computed month; refunds never count as negative spending."""
    return [
        CategorySpendState(
            category_id=category.category_id,
            name=category.name,
            spent=max(0, -category.activity),
            target_amount=category.target_amount or 0,
        )
        for group in state.groups
        for category in group.categories
    ]


def should_fire_alert(
    alert: AlertConfig,
    spent: int,
    target: int,
    history: Iterable[AlertHistoryEntry],
    month: str,
) -> bool:
    if target <= 0:
        return False
    if spent_percentage(spent, target) < alert.threshold_pct:
        return False
    return not any(entry.alert_id == alert.id and entry.month == month for entry in history)


def build_alert_notification(alert: AlertConfig, category: CategorySpendState) -> AlertNotification:
    spent_pct = spent_percentage(category.spent, category.target_amount)
    return AlertNotification(
        alert_id=alert.id,
        category_id=alert.category_id,
        category_name=category.name,
        threshold_pct=alert.threshold_pct,
        spent_pct=spent_pct,
        amount_spent=category.spent,
        target_amount=category.target_amount,
        message=f"{category.name}: {spent_pct}% of budget spent (threshold: {alert.threshold_pct}%)",
    )


def check_alerts(
    alerts: Iterable[AlertConfig],
    categories: Iterable[CategorySpendState],
    history: Iterable[AlertHistoryEntry],
    month: str,
) -> list[AlertNotification]:
    by_category = {category.category_id: category for category in categories}
    history = list(history)
    notifications: list[AlertNotification] = []

    for alert in alerts:
        if not alert.is_enabled:
            continue
        category = by_category.get(alert.category_id)
        if category is None or category.target_amount <= 0:
            continue
        if should_fire_alert(alert, category.spent, category.target_amount, history, month):
            notifications.append(build_alert_notification(alert, category))

    logger.debug("Budget alerts checked month=%s fired=%d", month, len(notifications))
    return notifications

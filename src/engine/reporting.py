"""
Spending reports over already-queried transactions and budget maps.

Transfers never count. Outflows are reported as positive cents.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from domain.report_schemas import (
    UNCATEGORIZED,
    BudgetVsSpentRow,
    CategorySpending,
    MonthlySpendingPoint,
    ReportCategory,
    SpendingTransaction,
    TopPayee,
    TransactionSplit,
)
from engine.money import round_half_up


def _percent(part: int, whole: int) -> int:
    return round_half_up(Decimal(part) * 100 / Decimal(whole)) if whole > 0 else 0


def get_spending_by_category(
    transactions: Iterable[SpendingTransaction],
    splits: Iterable[TransactionSplit],
    categories: Iterable[ReportCategory],
    start: date,
    end: date,
) -> list[CategorySpending]:
    """Outflows per category inside [start, end]; a split transaction is counted by its splits."""
    by_id = {category.category_id: category for category in categories}
    splits_by_txn: dict[str, list[TransactionSplit]] = defaultdict(list)
    for split in splits:
        splits_by_txn[split.transaction_id].append(split)

    totals: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    for txn in transactions:
        if txn.is_transfer or not start <= txn.posted_on <= end:
            continue
        parts = splits_by_txn.get(txn.id) or [
            TransactionSplit(transaction_id=txn.id, category_id=txn.category_id, amount=txn.amount)
        ]
        for part in parts:
            if part.amount >= 0:
                continue
            entry = totals[part.category_id or UNCATEGORIZED]
            entry[0] += -part.amount
            entry[1] += 1

    grand_total = sum(total for total, _ in totals.values())
    rows = []
    for category_id, (total, count) in totals.items():
        category = by_id.get(category_id)
        rows.append(
            CategorySpending(
                category_id=category_id,
                category_name=category.name if category else "Uncategorized",
                emoji=category.emoji if category else None,
                group_id=category.group_id if category else "",
                total_spent=total,
                transaction_count=count,
                percent_of_total=_percent(total, grand_total),
            )
        )
    rows.sort(key=lambda r: (-r.total_spent, r.category_id))
    return rows


def get_monthly_spending_trend(transactions: Iterable[SpendingTransaction], months: int) -> list[MonthlySpendingPoint]:
    """Spent and income per month for the latest `months` months that have activity."""
    if months <= 0:
        return []
    per_month: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    for txn in transactions:
        if txn.is_transfer:
            continue
        entry = per_month[f"{txn.posted_on.year:04d}-{txn.posted_on.month:02d}"]
        if txn.amount < 0:
            entry[0] += -txn.amount
        else:
            entry[1] += txn.amount
    recent = sorted(per_month)[-months:]
    return [
        MonthlySpendingPoint(month=month, total_spent=per_month[month][0], total_income=per_month[month][1])
        for month in recent
    ]


def get_budgeted_vs_spent(
    allocations: Mapping[str, int],
    activity: Mapping[str, int],
    categories: Iterable[ReportCategory],
) -> list[BudgetVsSpentRow]:
    names = {category.category_id: category.name for category in categories}
    rows = []
    for category_id, budgeted in allocations.items():
        spent = max(0, -activity.get(category_id, 0))
        if budgeted > 0:
            percent_used = _percent(spent, budgeted)
        else:
            percent_used = 100 if spent > 0 else 0
        rows.append(
            BudgetVsSpentRow(
                category_id=category_id,
                category_name=names.get(category_id, "Unknown"),
                budgeted=budgeted,
                spent=spent,
                remaining=budgeted - spent,
                percent_used=percent_used,
            )
        )
    rows.sort(key=lambda r: (-r.percent_used, r.category_id))
    return rows


def get_top_payees(transactions: Iterable[SpendingTransaction], limit: Optional[int] = 10) -> list[TopPayee]:
    totals: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    for txn in transactions:
        if txn.is_transfer or txn.amount >= 0:
            continue
        entry = totals[txn.payee]
        entry[0] += -txn.amount
        entry[1] += 1
    payees = [TopPayee(payee=payee, total_spent=total, transaction_count=count) for payee, (total, count) in totals.items()]
    payees.sort(key=lambda p: (-p.total_spent, p.payee))
    return payees if limit is None else payees[: max(limit, 0)]

from __future__ import annotations

from typing import Iterable, Mapping

from domain.models import AmountLookup
from domain.schemas import MonthBudgetState, RolloverRecord
from engine._dates import shift_month


def next_month(month: str) -> str:
    return shift_month(month, 1)


def calculate_rollover(allocated: int, activity: int, carry_forward: int) -> int:
    return carry_forward + allocated + activity


def process_month_rollover(state: MonthBudgetState) -> list[RolloverRecord]:
    """Close `state.month`: every category's available becomes a record for the following month."""
    to_month = next_month(state.month)
    return [
        RolloverRecord(
            category_id=cat.category_id,
            from_month=state.month,
            to_month=to_month,
            amount=calculate_rollover(cat.allocated, cat.activity, cat.carry_forward),
        )
        for group in state.groups
        for cat in group.categories
    ]


def apply_rollovers(allocations: Mapping[str, int], rollovers: Iterable[RolloverRecord]) -> dict[str, int]:
    lookup = AmountLookup(allocations)
    result = {key: lookup.amount_for(key) for key in lookup}
    for record in rollovers:
        result[record.category_id] = result.get(record.category_id, 0) + record.amount
    return result

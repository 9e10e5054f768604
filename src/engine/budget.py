"""
Envelope budget engine.

Money is assigned, not predicted: income lands in a global "ready to assign"
pool and the user hands it out to category envelopes. Each envelope's
available balance is what was assigned plus what carried over minus what was
spent; overspending shows up as a negative available and is reclaimed from
next month's pool by the caller.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from domain.models import AmountLookup, TargetType
from domain.schemas import (
    AllocationMove,
    CategoryBudgetState,
    CategoryInput,
    GroupBudgetState,
    MonthBudgetInput,
    MonthBudgetState,
)
from engine.money import round_half_up

logger = logging.getLogger(__name__)


def _target_progress(category: CategoryInput, activity: int, available: int) -> Optional[int]:
    target = category.target_amount
    if category.target_type is None or target is None:
        return None
    if target <= 0:
        logger.warning("Category target ignored category_id=%s target_amount=%s", category.category_id, target)
        return None

    if category.target_type == TargetType.SAVINGS_GOAL:
        funded = min(max(available, 0), target)
    else:
        funded = min(abs(activity), target)
    return round_half_up(Decimal(funded) * 100 / Decimal(target))


def calculate_month_budget(budget_input: MonthBudgetInput) -> MonthBudgetState:
    allocations = AmountLookup(budget_input.allocations)
    activity = AmountLookup(budget_input.activity)
    carry_forwards = AmountLookup(budget_input.carry_forwards)

    total_allocated = 0
    total_activity = 0
    total_overspent = 0
    groups: list[GroupBudgetState] = []

    for group in budget_input.groups:
        categories: list[CategoryBudgetState] = []
        for category in group.categories:
            cat_allocated = allocations.amount_for(category.category_id)
            cat_activity = activity.amount_for(category.category_id)
            cat_carry = carry_forwards.amount_for(category.category_id)
            available = cat_allocated + cat_carry + cat_activity

            categories.append(
                CategoryBudgetState(
                    category_id=category.category_id,
                    group_id=group.group_id,
                    name=category.name,
                    emoji=category.emoji,
                    allocated=cat_allocated,
                    activity=cat_activity,
                    carry_forward=cat_carry,
                    available=available,
                    target_amount=category.target_amount,
                    target_type=category.target_type,
                    target_progress=_target_progress(category, cat_activity, available),
                )
            )

        group_state = GroupBudgetState(
            group_id=group.group_id,
            name=group.name,
            allocated=sum(c.allocated for c in categories),
            activity=sum(c.activity for c in categories),
            available=sum(c.available for c in categories),
            categories=categories,
        )
        total_allocated += group_state.allocated
        total_activity += group_state.activity
        total_overspent += sum(max(0, -c.available) for c in categories)
        groups.append(group_state)

    ready_to_assign = budget_input.total_income - total_allocated - budget_input.overspent_last_month
    logger.debug(
        "Month budget computed month=%s groups=%d allocated=%d ready_to_assign=%d overspent=%d",
        budget_input.month,
        len(groups),
        total_allocated,
        ready_to_assign,
        total_overspent,
    )
    return MonthBudgetState(
        month=budget_input.month,
        total_income=budget_input.total_income,
        total_allocated=total_allocated,
        total_activity=total_activity,
        total_overspent=total_overspent,
        ready_to_assign=ready_to_assign,
        groups=groups,
    )


def get_carry_forward(state: MonthBudgetState) -> dict[str, int]:
    """Each category's available balance, to be used as next month's carry-forward."""
    return {cat.category_id: cat.available for group in state.groups for cat in group.categories}


def get_total_overspent(state: MonthBudgetState) -> int:
    """Overspending to feed into next month's `overspent_last_month`."""
    return state.total_overspent


def move_money_between_categories(from_category_id: str, to_category_id: str, amount: int) -> AllocationMove:
    if amount <= 0:
        raise ValueError("Move amount must be positive")
    if from_category_id == to_category_id:
        raise ValueError("Cannot move money to the same category")
    return AllocationMove(
        from_category_id=from_category_id,
        to_category_id=to_category_id,
        from_delta=-amount,
        to_delta=amount,
    )

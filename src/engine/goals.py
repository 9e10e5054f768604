"""
Savings goal tracking: progress, status, contribution suggestions and
completion projections.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from domain.models import GoalStatus
from domain.schemas import Goal, GoalProgress, GoalProjection, GoalReport
from engine._dates import add_months, month_difference
from engine.money import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalPaceConfig:
    # A goal is behind when its saving pace drops under this share of the required pace.
    pace_ratio: float = 0.9


DEFAULT_PACE_CONFIG = GoalPaceConfig()


def _is_completed(goal: Goal) -> bool:
    return goal.current_amount >= goal.target_amount


def calculate_goal_progress(goal: Goal) -> GoalProgress:
    if goal.target_amount <= 0:
        logger.warning("Goal has no positive target goal_id=%s target_amount=%d", goal.id, goal.target_amount)
        percentage = 0
    else:
        funded = min(max(goal.current_amount, 0), goal.target_amount)
        percentage = round_half_up(Decimal(funded) * 100 / Decimal(goal.target_amount))
    return GoalProgress(
        current_amount=goal.current_amount,
        target_amount=goal.target_amount,
        percentage=percentage,
        remaining=max(0, goal.target_amount - goal.current_amount),
    )


def get_goal_status(goal: Goal, today: date, config: Optional[GoalPaceConfig] = None) -> GoalStatus:
    config = config or DEFAULT_PACE_CONFIG
    if _is_completed(goal):
        return GoalStatus.COMPLETED
    if goal.target_date is None:
        return GoalStatus.ON_TRACK
    if today > goal.target_date:
        return GoalStatus.OVERDUE

    days_until = (goal.target_date - today).days
    if days_until == 0:
        return GoalStatus.BEHIND
    if goal.created_date is None:
        return GoalStatus.ON_TRACK

    remaining = goal.target_amount - goal.current_amount
    required_daily = Decimal(remaining) / days_until
    days_elapsed = max(1, (today - goal.created_date).days)
    actual_daily = Decimal(max(goal.current_amount, 0)) / days_elapsed

    if actual_daily < required_daily * Decimal(str(config.pace_ratio)):
        return GoalStatus.BEHIND
    return GoalStatus.ON_TRACK


def is_goal_on_track(goal: Goal, today: date, config: Optional[GoalPaceConfig] = None) -> bool:
    return get_goal_status(goal, today, config) in (GoalStatus.COMPLETED, GoalStatus.ON_TRACK)


def suggest_monthly_contribution(goal: Goal, today: date) -> Optional[int]:
    if goal.target_date is None or _is_completed(goal) or today > goal.target_date:
        return None
    remaining = goal.target_amount - goal.current_amount
    months_remaining = month_difference(today, goal.target_date)
    if months_remaining <= 0:
        # Target falls later this month: everything left is due now.
        return remaining
    return -(-remaining // months_remaining)


def calculate_goal_projection(goal: Goal, today: date) -> GoalProjection:
    if _is_completed(goal):
        return GoalProjection(projected_date=today, months_remaining=0, meets_target_date=True)

    if goal.monthly_contribution <= 0:
        return GoalProjection(
            projected_date=None,
            months_remaining=None,
            meets_target_date=False if goal.target_date else None,
        )

    remaining = goal.target_amount - goal.current_amount
    months_needed = -(-remaining // goal.monthly_contribution)
    meets_target_date = None
    if goal.target_date is not None:
        # The last contribution lands in month (months_needed - 1) counting from this one.
        last_contribution = add_months(today, months_needed - 1)
        meets_target_date = (last_contribution.year, last_contribution.month) <= (
            goal.target_date.year,
            goal.target_date.month,
        )
    return GoalProjection(
        projected_date=add_months(today, months_needed),
        months_remaining=months_needed,
        meets_target_date=meets_target_date,
    )


def build_goal_report(goal: Goal, today: date, config: Optional[GoalPaceConfig] = None) -> GoalReport:
    return GoalReport(
        goal_id=goal.id,
        name=goal.name,
        progress=calculate_goal_progress(goal),
        status=get_goal_status(goal, today, config),
        suggested_monthly_contribution=suggest_monthly_contribution(goal, today),
        projection=calculate_goal_projection(goal, today),
    )


def allocate_to_goal(goal: Goal, amount: int) -> Goal:
    if amount <= 0:
        raise ValueError("Allocation amount must be positive")
    return goal.model_copy(update={"current_amount": goal.current_amount + amount})


def deallocate_from_goal(goal: Goal, amount: int) -> Goal:
    if amount <= 0:
        raise ValueError("Withdrawal amount must be positive")
    if amount > goal.current_amount:
        raise ValueError(f"Cannot withdraw {amount} from goal {goal.id} holding {goal.current_amount}")
    return goal.model_copy(update={"current_amount": goal.current_amount - amount})

from __future__ import annotations

import unittest

from pydantic import ValidationError

from domain.models import AmountLookup, TargetType
from domain.schemas import CategoryGroupInput, CategoryInput, MonthBudgetInput
from engine.budget import (
    calculate_month_budget,
    get_carry_forward,
    get_total_overspent,
    move_money_between_categories,
)


def _budget(**overrides) -> MonthBudgetInput:
    payload = {
        "month": "2026-03",
        "groups": [
            CategoryGroupInput(
                group_id="g_fixed",
                name="Fixed",
                categories=[
                    CategoryInput(
                        category_id="rent",
                        name="Rent",
                        emoji="🏠",
                        target_amount=200000,
                        target_type=TargetType.MONTHLY,
                    ),
                ],
            ),
            CategoryGroupInput(
                group_id="g_everyday",
                name="Everyday",
                categories=[
                    CategoryInput(category_id="groceries", name="Groceries"),
                    CategoryInput(
                        category_id="vacation",
                        name="Vacation",
                        target_amount=100000,
                        target_type=TargetType.SAVINGS_GOAL,
                    ),
                ],
            ),
        ],
        "allocations": {"rent": 200000, "groceries": 55000},
        "activity": {"rent": -200000, "groceries": -42500},
        "total_income": 450000,
    }
    payload.update(overrides)
    return MonthBudgetInput(**payload)


def _category(state, category_id):
    return next(c for g in state.groups for c in g.categories if c.category_id == category_id)


class MonthBudgetTests(unittest.TestCase):
    def test_ready_to_assign_scenario(self) -> None:
        state = calculate_month_budget(_budget())

        self.assertEqual(state.ready_to_assign, 195000)
        self.assertEqual(state.total_allocated, 255000)
        self.assertEqual(state.total_activity, -242500)
        self.assertEqual(state.total_overspent, 0)
        self.assertEqual(_category(state, "rent").available, 0)
        self.assertEqual(_category(state, "groceries").available, 12500)

    def test_missing_map_entries_read_as_zero(self) -> None:
        state = calculate_month_budget(_budget())
        vacation = _category(state, "vacation")

        self.assertEqual((vacation.allocated, vacation.activity, vacation.carry_forward), (0, 0, 0))
        self.assertEqual(vacation.available, 0)
        self.assertEqual(vacation.target_progress, 0)

    def test_group_totals_match_category_totals(self) -> None:
        state = calculate_month_budget(_budget(carry_forwards={"vacation": 30000}, activity={"groceries": -70000}))

        category_sum = sum(c.available for g in state.groups for c in g.categories)
        group_sum = sum(g.available for g in state.groups)
        self.assertEqual(category_sum, group_sum)
        self.assertEqual([g.group_id for g in state.groups], ["g_fixed", "g_everyday"])
        self.assertEqual([c.category_id for c in state.groups[1].categories], ["groceries", "vacation"])

    def test_overspending_is_reported_positive(self) -> None:
        state = calculate_month_budget(_budget(activity={"rent": -200000, "groceries": -57000}))

        self.assertEqual(_category(state, "groceries").available, -2000)
        self.assertEqual(state.total_overspent, 2000)
        self.assertEqual(get_total_overspent(state), 2000)

    def test_overspent_last_month_reduces_ready_to_assign(self) -> None:
        state = calculate_month_budget(_budget(overspent_last_month=5000))
        self.assertEqual(state.ready_to_assign, 190000)

    def test_empty_month(self) -> None:
        state = calculate_month_budget(
            MonthBudgetInput(month="2026-03", total_income=100000, overspent_last_month=2500)
        )

        self.assertEqual(state.total_allocated, 0)
        self.assertEqual(state.total_activity, 0)
        self.assertEqual(state.total_overspent, 0)
        self.assertEqual(state.ready_to_assign, 97500)
        self.assertEqual(state.groups, [])

    def test_negative_allocations_are_not_clamped(self) -> None:
        state = calculate_month_budget(_budget(allocations={"rent": 200000, "groceries": -1000}))

        self.assertEqual(_category(state, "groceries").allocated, -1000)
        self.assertEqual(state.total_allocated, 199000)
        self.assertEqual(state.ready_to_assign, 251000)

    def test_target_progress(self) -> None:
        state = calculate_month_budget(
            _budget(carry_forwards={"vacation": 30000}, allocations={"rent": 200000, "vacation": 20000})
        )

        self.assertEqual(_category(state, "rent").target_progress, 100)
        self.assertEqual(_category(state, "vacation").target_progress, 50)
        self.assertIsNone(_category(state, "groceries").target_progress)

    def test_monthly_target_progress_caps_at_100(self) -> None:
        state = calculate_month_budget(_budget(activity={"rent": -250000}))
        self.assertEqual(_category(state, "rent").target_progress, 100)

    def test_zero_target_has_no_progress(self) -> None:
        budget = MonthBudgetInput(
            month="2026-03",
            groups=[
                CategoryGroupInput(
                    group_id="g",
                    name="G",
                    categories=[
                        CategoryInput(category_id="c", name="C", target_amount=0, target_type=TargetType.MONTHLY)
                    ],
                )
            ],
        )
        with self.assertLogs("engine.budget", level="WARNING"):
            state = calculate_month_budget(budget)
        self.assertIsNone(_category(state, "c").target_progress)

    def test_calculation_is_repeatable(self) -> None:
        budget = _budget()
        self.assertEqual(calculate_month_budget(budget), calculate_month_budget(budget))

    def test_invalid_month_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            MonthBudgetInput(month="2026-13")

    def test_carry_forward_map(self) -> None:
        state = calculate_month_budget(_budget())
        self.assertEqual(get_carry_forward(state), {"rent": 0, "groceries": 12500, "vacation": 0})


class MoveMoneyTests(unittest.TestCase):
    def test_move_produces_balanced_deltas(self) -> None:
        move = move_money_between_categories("groceries", "vacation", 5000)
        self.assertEqual((move.from_delta, move.to_delta), (-5000, 5000))

    def test_invalid_moves_raise(self) -> None:
        with self.assertRaises(ValueError):
            move_money_between_categories("groceries", "groceries", 5000)
        with self.assertRaises(ValueError):
            move_money_between_categories("groceries", "vacation", 0)


class AmountLookupTests(unittest.TestCase):
    def test_absent_keys_are_zero(self) -> None:
        source = {"a": 100}
        lookup = AmountLookup(source)
        source["b"] = 5

        self.assertEqual(lookup.amount_for("a"), 100)
        self.assertEqual(lookup.amount_for("b"), 0)
        self.assertNotIn("b", lookup)
        self.assertEqual(lookup.total(), 100)


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import unittest

from domain.schemas import CategoryGroupInput, CategoryInput, MonthBudgetInput
from engine.budget import calculate_month_budget
from engine.rollover import apply_rollovers, calculate_rollover, next_month, process_month_rollover


class RolloverTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = calculate_month_budget(
            MonthBudgetInput(
                month="2026-12",
                groups=[
                    CategoryGroupInput(
                        group_id="g",
                        name="Everyday",
                        categories=[
                            CategoryInput(category_id="rent", name="Rent"),
                            CategoryInput(category_id="groceries", name="Groceries"),
                        ],
                    )
                ],
                allocations={"rent": 200000, "groceries": 55000},
                activity={"rent": -200000, "groceries": -42500},
                carry_forwards={"groceries": 1000},
            )
        )

    def test_next_month_wraps_year(self) -> None:
        self.assertEqual(next_month("2026-12"), "2027-01")
        self.assertEqual(next_month("2026-03"), "2026-04")

    def test_calculate_rollover(self) -> None:
        self.assertEqual(calculate_rollover(100, -30, 20), 90)

    def test_process_month_rollover(self) -> None:
        records = process_month_rollover(self.state)

        self.assertEqual([r.category_id for r in records], ["rent", "groceries"])
        self.assertEqual([r.amount for r in records], [0, 13500])
        self.assertTrue(all(r.from_month == "2026-12" and r.to_month == "2027-01" for r in records))

    def test_apply_rollovers_adds_to_existing_allocations(self) -> None:
        allocations = {"groceries": 50000, "fun": 1000}
        result = apply_rollovers(allocations, process_month_rollover(self.state))

        self.assertEqual(result, {"groceries": 63500, "fun": 1000, "rent": 0})
        self.assertEqual(allocations, {"groceries": 50000, "fun": 1000})


if __name__ == "__main__":
    unittest.main()

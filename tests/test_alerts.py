from __future__ import annotations

import unittest

from domain.models import TargetType
from domain.report_schemas import AlertConfig, AlertHistoryEntry, CategorySpendState
from domain.schemas import CategoryGroupInput, CategoryInput, MonthBudgetInput
from engine.alerts import category_spend_states, check_alerts, should_fire_alert
from engine.budget import calculate_month_budget

GROCERIES = CategorySpendState(category_id="groceries", name="Groceries", spent=45000, target_amount=50000)
DINING = CategorySpendState(category_id="dining", name="Dining", spent=10000, target_amount=40000)
GIFTS = CategorySpendState(category_id="gifts", name="Gifts", spent=5000, target_amount=0)


def _history(alert_id: str, month: str) -> AlertHistoryEntry:
    return AlertHistoryEntry(
        alert_id=alert_id,
        category_id="groceries",
        month=month,
        threshold_pct=80,
        spent_pct=85,
        amount_spent=42500,
        target_amount=50000,
    )


class CheckAlertsTests(unittest.TestCase):
    def test_fires_over_threshold(self) -> None:
        alerts = [
            AlertConfig(id="a1", category_id="groceries", threshold_pct=80),
            AlertConfig(id="a2", category_id="dining", threshold_pct=80),
            AlertConfig(id="a3", category_id="gifts", threshold_pct=10),
            AlertConfig(id="a4", category_id="missing", threshold_pct=10),
        ]
        fired = check_alerts(alerts, [GROCERIES, DINING, GIFTS], [], "2026-03")

        self.assertEqual([n.alert_id for n in fired], ["a1"])
        self.assertEqual(fired[0].spent_pct, 90)
        self.assertEqual(fired[0].message, "Groceries: 90% of budget spent (threshold: 80%)")

    def test_disabled_alert_is_skipped(self) -> None:
        alert = AlertConfig(id="a1", category_id="groceries", threshold_pct=50, is_enabled=False)
        self.assertEqual(check_alerts([alert], [GROCERIES], [], "2026-03"), [])

    def test_fires_once_per_month(self) -> None:
        alert = AlertConfig(id="a1", category_id="groceries", threshold_pct=80)

        self.assertEqual(check_alerts([alert], [GROCERIES], [_history("a1", "2026-03")], "2026-03"), [])
        self.assertEqual(len(check_alerts([alert], [GROCERIES], [_history("a1", "2026-02")], "2026-03")), 1)

    def test_threshold_uses_rounded_percentage(self) -> None:
        alert = AlertConfig(id="a1", category_id="groceries", threshold_pct=80)

        self.assertTrue(should_fire_alert(alert, 7950, 10000, [], "2026-03"))
        self.assertFalse(should_fire_alert(alert, 7949, 10000, [], "2026-03"))
        self.assertFalse(should_fire_alert(alert, 7950, 0, [], "2026-03"))


class SpendStateTests(unittest.TestCase):
    def test_states_from_month_budget(self) -> None:
        budget = MonthBudgetInput(
            month="2026-03",
            groups=[
                CategoryGroupInput(
                    group_id="g",
                    name="Everyday",
                    categories=[
                        CategoryInput(
                            category_id="groceries",
                            name="Groceries",
                            target_amount=50000,
                            target_type=TargetType.MONTHLY,
                        ),
                        CategoryInput(category_id="refunds", name="Refunds"),
                    ],
                )
            ],
            activity={"groceries": -45000, "refunds": 2000},
        )
        states = category_spend_states(calculate_month_budget(budget))

        self.assertEqual(
            [(s.category_id, s.spent, s.target_amount) for s in states],
            [("groceries", 45000, 50000), ("refunds", 0, 0)],
        )


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import unittest
from datetime import date

from domain.models import BillingCycle
from domain.subscription_schemas import PriceHistoryEntry, Subscription
from engine.price_history import get_lifetime_cost, record_price_change


class PriceHistoryTests(unittest.TestCase):
    def test_record_price_change_keeps_old_price_in_history(self) -> None:
        sub = Subscription(
            id="netflix", name="Netflix", price=1599, billing_cycle=BillingCycle.MONTHLY, start_date=date(2025, 1, 1)
        )
        updated, entry = record_price_change(sub, 1799, date(2026, 3, 1), "ph_1")

        self.assertEqual(updated.price, 1799)
        self.assertEqual(sub.price, 1599)
        self.assertEqual((entry.subscription_id, entry.price, entry.effective_date), ("netflix", 1599, date(2026, 3, 1)))

    def test_unchanged_price_is_rejected(self) -> None:
        sub = Subscription(
            id="netflix", name="Netflix", price=1599, billing_cycle=BillingCycle.MONTHLY, start_date=date(2025, 1, 1)
        )
        with self.assertRaises(ValueError):
            record_price_change(sub, 1599, date(2026, 3, 1), "ph_1")

    def test_lifetime_cost_without_history(self) -> None:
        sub = Subscription(
            id="domain", name="Domain", price=36525, billing_cycle=BillingCycle.ANNUAL, start_date=date(2025, 1, 1)
        )
        self.assertEqual(get_lifetime_cost(sub, [], date(2026, 1, 1)), 36500)
        self.assertEqual(get_lifetime_cost(sub, [], date(2024, 12, 1)), 0)

    def test_lifetime_cost_splits_at_price_changes(self) -> None:
        sub = Subscription(
            id="paper", name="Paper", price=1400, billing_cycle=BillingCycle.WEEKLY, start_date=date(2026, 1, 1)
        )
        history = [
            PriceHistoryEntry(id="ph_1", subscription_id="paper", price=700, effective_date=date(2026, 1, 15)),
            PriceHistoryEntry(id="ph_x", subscription_id="other", price=99999, effective_date=date(2026, 1, 10)),
        ]
        self.assertEqual(get_lifetime_cost(sub, history, date(2026, 1, 29)), 4200)

    def test_custom_cycle_without_days_has_no_cost(self) -> None:
        sub = Subscription(
            id="broken", name="Broken", price=500, billing_cycle=BillingCycle.CUSTOM, start_date=date(2026, 1, 1)
        )
        self.assertEqual(get_lifetime_cost(sub, [], date(2026, 6, 1)), 0)


if __name__ == "__main__":
    unittest.main()

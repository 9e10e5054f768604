from __future__ import annotations

import unittest
from datetime import date

from domain.debt_schemas import Debt
from domain.models import Compounding, PayoffStrategy
from engine.debt_payoff import (
    MAX_MONTHS,
    calculate_avalanche,
    calculate_monthly_interest,
    calculate_payoff,
    calculate_snowball,
    generate_amortization_schedule,
    order_debts,
    project_payoff_date,
)

TODAY = date(2026, 10, 19)


def _debt(debt_id: str, balance: int, rate: int, minimum: int, **extra) -> Debt:
    return Debt(id=debt_id, name=debt_id.title(), balance=balance, interest_rate=rate, minimum_payment=minimum, **extra)


CAR = _debt("car", 50000, 500, 10000)
CARD = _debt("card", 200000, 2000, 10000)


class InterestTests(unittest.TestCase):
    def test_monthly_and_daily_compounding(self) -> None:
        self.assertEqual(calculate_monthly_interest(100000, 1200, Compounding.MONTHLY), 1000)
        daily = calculate_monthly_interest(100000, 1200, Compounding.DAILY)
        self.assertGreater(daily, 1000)
        self.assertLess(daily, 1010)

    def test_no_interest_without_balance_or_rate(self) -> None:
        self.assertEqual(calculate_monthly_interest(0, 1800, Compounding.MONTHLY), 0)
        self.assertEqual(calculate_monthly_interest(100000, 0, Compounding.DAILY), 0)


class PayoffTests(unittest.TestCase):
    def test_strategy_ordering(self) -> None:
        self.assertEqual([d.id for d in order_debts([CARD, CAR], PayoffStrategy.SNOWBALL)], ["car", "card"])
        self.assertEqual([d.id for d in order_debts([CAR, CARD], PayoffStrategy.AVALANCHE)], ["card", "car"])

    def test_interest_free_debt(self) -> None:
        plan = calculate_payoff([_debt("loan", 100000, 0, 25000)], PayoffStrategy.SNOWBALL, 10000, TODAY)

        self.assertEqual(plan.total_months, 3)
        self.assertEqual((plan.total_paid, plan.total_interest), (100000, 0))
        self.assertEqual([e.payment for e in plan.schedule], [35000, 35000, 30000])
        self.assertEqual(plan.schedule[-1].remaining_balance, 0)
        self.assertEqual(plan.debt_free_month, "2027-01")

    def test_snowball_sends_extra_to_smallest_balance(self) -> None:
        plan = calculate_snowball([CARD, CAR], 20000, TODAY)
        first_month = {e.debt_id: e for e in plan.schedule if e.month == 1}

        self.assertEqual(plan.strategy, PayoffStrategy.SNOWBALL)
        self.assertEqual((first_month["car"].payment, first_month["car"].interest), (30000, 208))
        self.assertEqual(first_month["car"].principal, 29792)
        self.assertEqual(first_month["car"].remaining_balance, 20208)
        self.assertEqual((first_month["card"].payment, first_month["card"].remaining_balance), (10000, 193333))

    def test_avalanche_sends_extra_to_highest_rate(self) -> None:
        plan = calculate_avalanche([CAR, CARD], 20000, TODAY)
        first_month = {e.debt_id: e for e in plan.schedule if e.month == 1}

        self.assertEqual((first_month["card"].payment, first_month["card"].remaining_balance), (30000, 173333))
        self.assertEqual((first_month["car"].payment, first_month["car"].remaining_balance), (10000, 40208))

    def test_totals_balance_and_avalanche_saves_interest(self) -> None:
        snowball = calculate_snowball([CAR, CARD], 20000, TODAY)
        avalanche = calculate_avalanche([CAR, CARD], 20000, TODAY)

        for plan in (snowball, avalanche):
            self.assertEqual(plan.total_paid, CAR.balance + CARD.balance + plan.total_interest)
            self.assertEqual(sum(e.payment for e in plan.schedule), plan.total_paid)
            self.assertIsNotNone(plan.debt_free_month)
        self.assertLessEqual(avalanche.total_interest, snowball.total_interest)

    def test_no_debts(self) -> None:
        plan = calculate_avalanche([], 10000, TODAY)
        self.assertEqual((plan.total_months, plan.total_paid, plan.schedule), (0, 0, []))
        self.assertIsNone(plan.debt_free_month)

    def test_payment_below_interest_never_finishes(self) -> None:
        with self.assertLogs("engine.debt_payoff", level="WARNING"):
            plan = calculate_payoff([_debt("card", 100000, 2400, 1000)], PayoffStrategy.AVALANCHE, 0, TODAY)
        self.assertEqual(plan.total_months, MAX_MONTHS)
        self.assertIsNone(plan.debt_free_month)

    def test_negative_extra_payment_rejected(self) -> None:
        with self.assertRaises(ValueError):
            calculate_payoff([CAR], PayoffStrategy.SNOWBALL, -1, TODAY)

    def test_projection_matches_plan(self) -> None:
        projection = project_payoff_date([CAR, CARD], PayoffStrategy.AVALANCHE, 20000, TODAY)
        plan = calculate_avalanche([CAR, CARD], 20000, TODAY)
        self.assertEqual((projection.total_months, projection.debt_free_month), (plan.total_months, plan.debt_free_month))


class AmortizationTests(unittest.TestCase):
    def test_schedule_with_interest(self) -> None:
        entries = generate_amortization_schedule(_debt("loan", 10000, 1200, 5000))

        self.assertEqual([e.interest for e in entries], [100, 51, 2])
        self.assertEqual([e.payment for e in entries], [5000, 5000, 153])
        self.assertEqual([e.remaining_balance for e in entries], [5100, 151, 0])
        self.assertEqual(entries[-1].principal, 151)

    def test_nothing_to_amortize(self) -> None:
        self.assertEqual(generate_amortization_schedule(_debt("loan", 10000, 1200, 0)), [])
        self.assertEqual(generate_amortization_schedule(_debt("loan", 0, 1200, 5000)), [])


if __name__ == "__main__":
    unittest.main()

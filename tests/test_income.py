from __future__ import annotations

import unittest
from datetime import date

from domain.income_schemas import IncomeTransaction
from domain.models import IncomeFrequency, IncomePattern
from engine.income import (
    IncomeEstimationConfig,
    classify_income_pattern,
    coefficient_of_variation,
    detect_income_streams,
    estimate_monthly_income,
)


def _txn(payee: str, posted_on: date, amount: int, **extra) -> IncomeTransaction:
    return IncomeTransaction(posted_on=posted_on, payee=payee, amount=amount, **extra)


SALARY = [_txn("ACME PAYROLL", date(2026, m, 15), 300000) for m in (1, 2, 3, 4)]
FREELANCE = [
    _txn("Client Co", date(2026, 1, 10), 100000),
    _txn("Client Co", date(2026, 2, 10), 150000),
    _txn("Client Co", date(2026, 3, 10), 80000),
]
GARAGE = [_txn("Garage sale", date(2026, 1, 3), 5000), _txn("Garage sale", date(2026, 3, 20), 7000)]


class IncomeStreamTests(unittest.TestCase):
    def test_streams_are_classified(self) -> None:
        one_off = [_txn("Tax refund", date(2026, 2, 20), 45000)]
        streams = detect_income_streams(SALARY + FREELANCE + GARAGE + one_off)

        self.assertEqual([s.payee for s in streams], ["ACME PAYROLL", "Client Co", "Garage sale"])
        salary, freelance, garage = streams

        self.assertEqual((salary.frequency, salary.pattern), (IncomeFrequency.MONTHLY, IncomePattern.SALARY))
        self.assertEqual((salary.occurrences, salary.total_amount), (4, 1200000))
        self.assertEqual(salary.amount_variance, 0.0)
        self.assertEqual(salary.last_seen, date(2026, 4, 15))

        self.assertEqual((freelance.frequency, freelance.pattern), (IncomeFrequency.MONTHLY, IncomePattern.FREELANCE))
        self.assertEqual(freelance.average_amount, 110000)
        self.assertEqual(freelance.amount_variance, 0.27)

        self.assertEqual((garage.frequency, garage.pattern), (IncomeFrequency.IRREGULAR, IncomePattern.IRREGULAR))

    def test_classification_threshold_is_configurable(self) -> None:
        freelance = detect_income_streams(FREELANCE)[0]
        self.assertEqual(classify_income_pattern(freelance), IncomePattern.FREELANCE)
        self.assertEqual(
            classify_income_pattern(freelance, IncomeEstimationConfig(variance_threshold=0.5)),
            IncomePattern.SALARY,
        )

    def test_coefficient_of_variation(self) -> None:
        self.assertEqual(coefficient_of_variation([100]), 0.0)
        self.assertEqual(coefficient_of_variation([100, 100, 100]), 0.0)
        self.assertAlmostEqual(coefficient_of_variation([50, 150]), 0.5)


class EstimateMonthlyIncomeTests(unittest.TestCase):
    def test_estimate_over_explicit_window(self) -> None:
        txns = SALARY + [
            _txn("Savings", date(2026, 2, 1), 50000, is_transfer=True),
            _txn("ACME PAYROLL", date(2025, 12, 15), 300000),
        ]
        estimate = estimate_monthly_income(txns, window_start=date(2026, 1, 1), window_end=date(2026, 4, 30))

        self.assertEqual(estimate.total_income, 1200000)
        self.assertEqual(estimate.months_spanned, 4)
        self.assertEqual(estimate.monthly_estimate, 300000)
        self.assertEqual(estimate.sample_count, 4)
        self.assertAlmostEqual(estimate.confidence, 0.95)
        self.assertEqual(estimate.window.start, date(2026, 1, 1))

    def test_short_window_divides_by_one_month(self) -> None:
        txns = [_txn("Gig", date(2026, 1, 1), 100000), _txn("Gig", date(2026, 1, 10), 100000)]
        estimate = estimate_monthly_income(txns)

        self.assertEqual(estimate.months_spanned, 1)
        self.assertEqual(estimate.monthly_estimate, 200000)
        self.assertEqual((estimate.window.start, estimate.window.end), (date(2026, 1, 1), date(2026, 1, 31)))

    def test_default_window_covers_the_months_paid(self) -> None:
        txns = [_txn("ACME PAYROLL", date(2026, m, 15), 300000) for m in (1, 2, 3)]
        estimate = estimate_monthly_income(txns)

        self.assertEqual(estimate.months_spanned, 3)
        self.assertEqual(estimate.monthly_estimate, 300000)
        self.assertEqual((estimate.window.start, estimate.window.end), (date(2026, 1, 1), date(2026, 3, 31)))

    def test_open_ended_window_after_last_deposit(self) -> None:
        txns = [_txn("ACME PAYROLL", date(2026, 1, 15), 300000)]
        estimate = estimate_monthly_income(txns, window_start=date(2026, 3, 1))

        self.assertEqual((estimate.window.start, estimate.window.end), (date(2026, 3, 1), date(2026, 3, 1)))
        self.assertEqual((estimate.total_income, estimate.monthly_estimate, estimate.sample_count), (0, 0, 0))
        self.assertEqual(estimate.months_spanned, 1)

    def test_open_ended_window_before_first_deposit(self) -> None:
        txns = [_txn("ACME PAYROLL", date(2026, 3, 15), 300000)]
        estimate = estimate_monthly_income(txns, window_end=date(2026, 1, 31))

        self.assertEqual((estimate.window.start, estimate.window.end), (date(2026, 1, 31), date(2026, 1, 31)))
        self.assertEqual(estimate.total_income, 0)

    def test_one_off_income_dilutes_confidence(self) -> None:
        txns = SALARY + [_txn("Tax refund", date(2026, 2, 20), 1200000)]
        estimate = estimate_monthly_income(txns, window_start=date(2026, 1, 1), window_end=date(2026, 4, 30))

        self.assertEqual(estimate.total_income, 2400000)
        self.assertLess(estimate.confidence, 0.5)
        self.assertEqual(len(estimate.streams), 1)

    def test_no_income(self) -> None:
        estimate = estimate_monthly_income([_txn("Rent", date(2026, 1, 1), -150000)])

        self.assertEqual((estimate.monthly_estimate, estimate.total_income, estimate.sample_count), (0, 0, 0))
        self.assertEqual(estimate.confidence, 0.0)
        self.assertIsNone(estimate.window)
        self.assertEqual(estimate.streams, [])

    def test_explicit_window_without_income(self) -> None:
        estimate = estimate_monthly_income([], window_start=date(2026, 1, 1), window_end=date(2026, 1, 31))
        self.assertEqual((estimate.monthly_estimate, estimate.months_spanned), (0, 1))

    def test_reversed_window_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            estimate_monthly_income(SALARY, window_start=date(2026, 5, 1), window_end=date(2026, 1, 1))


if __name__ == "__main__":
    unittest.main()

"""
Debt payoff planning.

Snowball pays the smallest balance first, avalanche the highest rate first.
Every month each open debt accrues interest and receives its minimum payment;
the extra payment then goes to open debts in strategy order until it runs out.
Rates are basis points of APR and all amounts are cents.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable

from domain.debt_schemas import AmortizationEntry, Debt, DebtPayoffResult, PayoffProjection, PayoffScheduleEntry
from domain.models import Compounding, PayoffStrategy
from engine._dates import shift_month
from engine.money import round_half_up

logger = logging.getLogger(__name__)

MAX_MONTHS = 600
BASIS_POINTS = Decimal(10_000)
AVERAGE_DAYS_PER_MONTH = Decimal("30.4375")


def calculate_monthly_interest(balance: int, interest_rate: int, compounding: Compounding) -> int:
    """Interest accrued over one month, rounded to the cent."""
    if balance <= 0 or interest_rate <= 0:
        return 0
    apr = Decimal(interest_rate) / BASIS_POINTS
    if Compounding(compounding) == Compounding.DAILY:
        multiplier = (1 + apr / 365) ** AVERAGE_DAYS_PER_MONTH - 1
        return round_half_up(Decimal(balance) * multiplier)
    return round_half_up(Decimal(balance) * apr / 12)


def order_debts(debts: Iterable[Debt], strategy: PayoffStrategy) -> list[Debt]:
    if PayoffStrategy(strategy) == PayoffStrategy.SNOWBALL:
        return sorted(debts, key=lambda d: (d.balance, -d.interest_rate, d.id))
    return sorted(debts, key=lambda d: (-d.interest_rate, d.balance, d.id))


def calculate_payoff(
    debts: Iterable[Debt],
    strategy: PayoffStrategy,
    extra_payment: int,
    today: date,
) -> DebtPayoffResult:
    if extra_payment < 0:
        raise ValueError("extra_payment must not be negative")
    strategy = PayoffStrategy(strategy)
    ordered = order_debts(debts, strategy)
    balances = {debt.id: max(debt.balance, 0) for debt in ordered}

    schedule: list[PayoffScheduleEntry] = []
    total_paid = 0
    total_interest = 0
    month = 0

    while month < MAX_MONTHS and any(balance > 0 for balance in balances.values()):
        month += 1
        rows: dict[str, dict[str, int]] = {}

        for debt in ordered:
            balance = balances[debt.id]
            if balance <= 0:
                continue
            interest = calculate_monthly_interest(balance, debt.interest_rate, debt.compounding)
            balance += interest
            payment = min(debt.minimum_payment, balance)
            balances[debt.id] = balance - payment
            total_interest += interest
            total_paid += payment
            rows[debt.id] = {"payment": payment, "principal": max(0, payment - interest), "interest": interest}

        extra = extra_payment
        for debt in ordered:
            if extra <= 0:
                break
            balance = balances[debt.id]
            if balance <= 0 or debt.id not in rows:
                continue
            paid = min(extra, balance)
            balances[debt.id] = balance - paid
            total_paid += paid
            extra -= paid
            rows[debt.id]["payment"] += paid
            rows[debt.id]["principal"] += paid

        for debt in ordered:
            if debt.id in rows:
                schedule.append(
                    PayoffScheduleEntry(
                        month=month,
                        debt_id=debt.id,
                        debt_name=debt.name,
                        remaining_balance=balances[debt.id],
                        **rows[debt.id],
                    )
                )

    debt_free_month = None
    if 0 < month < MAX_MONTHS:
        debt_free_month = shift_month(f"{today.year:04d}-{today.month:02d}", month)
    elif month >= MAX_MONTHS:
        logger.warning("Debt payoff did not finish within %d months strategy=%s", MAX_MONTHS, strategy.value)

    logger.debug(
        "Debt payoff strategy=%s months=%d paid=%d interest=%d",
        strategy.value,
        month,
        total_paid,
        total_interest,
    )
    return DebtPayoffResult(
        strategy=strategy,
        schedule=schedule,
        total_months=month,
        total_paid=total_paid,
        total_interest=total_interest,
        debt_free_month=debt_free_month,
    )


def calculate_snowball(debts: Iterable[Debt], extra_payment: int, today: date) -> DebtPayoffResult:
    return calculate_payoff(debts, PayoffStrategy.SNOWBALL, extra_payment, today)


def calculate_avalanche(debts: Iterable[Debt], extra_payment: int, today: date) -> DebtPayoffResult:
    return calculate_payoff(debts, PayoffStrategy.AVALANCHE, extra_payment, today)


def project_payoff_date(
    debts: Iterable[Debt],
    strategy: PayoffStrategy,
    extra_payment: int,
    today: date,
) -> PayoffProjection:
    result = calculate_payoff(debts, strategy, extra_payment, today)
    return PayoffProjection(total_months=result.total_months, debt_free_month=result.debt_free_month)


def generate_amortization_schedule(debt: Debt) -> list[AmortizationEntry]:
    """Month-by-month schedule paying exactly the minimum payment."""
    if debt.balance <= 0 or debt.minimum_payment <= 0:
        return []

    entries: list[AmortizationEntry] = []
    balance = debt.balance
    month = 0
    while balance > 0 and month < MAX_MONTHS:
        month += 1
        interest = calculate_monthly_interest(balance, debt.interest_rate, debt.compounding)
        balance += interest
        payment = min(debt.minimum_payment, balance)
        balance -= payment
        entries.append(
            AmortizationEntry(
                month=month,
                payment=payment,
                principal=max(0, payment - interest),
                interest=interest,
                remaining_balance=balance,
            )
        )
    return entries

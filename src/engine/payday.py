"""
Payday detection over noisy deposit histories.

Deposits are grouped by normalized payee. The median gap between a payee's
deposit dates picks the nearest known cadence; the share of gaps that agree
with that cadence (capped for short histories) becomes the confidence.
"""

from __future__ import annotations

import logging
import re
from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from statistics import median
from typing import Iterable, Optional

from domain.income_schemas import IncomeTransaction, PaydayPattern, PaydayPrediction
from domain.models import PaydayFrequency
from engine._dates import add_months, days_in_month
from engine.money import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_CADENCES: tuple[tuple[PaydayFrequency, int], ...] = (
    (PaydayFrequency.WEEKLY, 7),
    (PaydayFrequency.BIWEEKLY, 14),
    (PaydayFrequency.SEMI_MONTHLY, 15),
    (PaydayFrequency.MONTHLY, 30),
)


@dataclass(frozen=True)
class PaydayDetectionConfig:
    tolerance_days: int = 3
    min_occurrences: int = 2
    min_confidence: float = 0.5
    # Confidence ceiling for short histories: base + step per observed gap, at most 1.
    small_sample_base: float = 0.4
    small_sample_step: float = 0.2
    semi_monthly_coverage: float = 0.8
    cadences: tuple[tuple[PaydayFrequency, int], ...] = DEFAULT_CADENCES


DEFAULT_DETECTION_CONFIG = PaydayDetectionConfig()


def normalize_payee(text: str) -> str:
    value = (text or "").lower()
    value = re.sub(r"\d+", "", value)
    value = re.sub(r"[^a-z ]+", " ", value)
    value = re.sub(r"\s+", " ", value).strip()
    return value or "unknown"


def is_qualifying_income(txn: IncomeTransaction) -> bool:
    return txn.amount > 0 and not txn.is_transfer


def group_by_payee(transactions: Iterable[IncomeTransaction]) -> dict[str, list[IncomeTransaction]]:
    """Qualifying deposits per normalized payee, each list in date order."""
    grouped: dict[str, list[IncomeTransaction]] = defaultdict(list)
    for txn in transactions:
        if is_qualifying_income(txn):
            grouped[normalize_payee(txn.payee)].append(txn)
    return {key: sorted(txns, key=lambda t: (t.posted_on, t.id or "")) for key, txns in grouped.items()}


def gaps_in_days(dates: list[date]) -> list[int]:
    return [(dates[i] - dates[i - 1]).days for i in range(1, len(dates))]


def _semi_monthly_anchors(dates: list[date], config: PaydayDetectionConfig) -> Optional[list[int]]:
    counts = Counter(d.day for d in dates)
    top_two = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:2]
    if len(top_two) < 2 or any(count < 2 for _, count in top_two):
        return None
    covered = sum(count for _, count in top_two)
    if covered < len(dates) * config.semi_monthly_coverage:
        return None
    return sorted(day for day, _ in top_two)


def detect_cadence(
    dates: list[date],
    config: Optional[PaydayDetectionConfig] = None,
) -> Optional[tuple[PaydayFrequency, int]]:
    """
    Nearest cadence to the median gap of `dates` (sorted, distinct), or None
    when no cadence lies within the tolerance window.

    A two-week median is semi-monthly only when the days of month settle on
    two anchors; otherwise it is biweekly.
    """
    config = config or DEFAULT_DETECTION_CONFIG
    gaps = gaps_in_days(dates)
    if not gaps:
        return None

    typical = median(gaps)
    frequency, cadence_days = min(config.cadences, key=lambda c: abs(typical - c[1]))
    if abs(typical - cadence_days) > config.tolerance_days:
        return None

    if frequency in (PaydayFrequency.BIWEEKLY, PaydayFrequency.SEMI_MONTHLY):
        cadences = dict(config.cadences)
        if _semi_monthly_anchors(dates, config) is not None:
            return PaydayFrequency.SEMI_MONTHLY, cadences.get(PaydayFrequency.SEMI_MONTHLY, 15)
        return PaydayFrequency.BIWEEKLY, cadences.get(PaydayFrequency.BIWEEKLY, 14)
    return frequency, cadence_days


def cadence_confidence(gaps: list[int], cadence_days: int, config: Optional[PaydayDetectionConfig] = None) -> float:
    config = config or DEFAULT_DETECTION_CONFIG
    if not gaps:
        return 0.0
    matching = sum(1 for gap in gaps if abs(gap - cadence_days) <= config.tolerance_days)
    ceiling = min(1.0, config.small_sample_base + config.small_sample_step * len(gaps))
    return round(min(matching / len(gaps), ceiling), 2)


def _average_amount(txns: list[IncomeTransaction]) -> int:
    return round_half_up(Decimal(sum(t.amount for t in txns)) / len(txns))


def _build_pattern(
    txns: list[IncomeTransaction],
    config: PaydayDetectionConfig,
) -> Optional[PaydayPattern]:
    dates = sorted({t.posted_on for t in txns})
    if len(dates) < config.min_occurrences:
        return None

    cadence = detect_cadence(dates, config)
    if cadence is None:
        return None
    frequency, cadence_days = cadence

    confidence = cadence_confidence(gaps_in_days(dates), cadence_days, config)
    if confidence < config.min_confidence:
        return None

    last = dates[-1]
    fields: dict = {}
    if frequency in (PaydayFrequency.WEEKLY, PaydayFrequency.BIWEEKLY):
        fields = {"interval_days": cadence_days, "day_of_week": last.weekday()}
    elif frequency == PaydayFrequency.SEMI_MONTHLY:
        fields = {"days_of_month": _semi_monthly_anchors(dates, config)}
    else:
        day_counts = Counter(d.day for d in dates)
        fields = {"day_of_month": max(day_counts.items(), key=lambda item: (item[1], item[0]))[0]}

    return PaydayPattern(
        payee=txns[0].payee,
        frequency=frequency,
        average_amount=_average_amount(txns),
        confidence=confidence,
        occurrences=len(dates),
        last_occurrence=last,
        **fields,
    )


def detect_paydays(
    transactions: Iterable[IncomeTransaction],
    config: Optional[PaydayDetectionConfig] = None,
) -> list[PaydayPattern]:
    config = config or DEFAULT_DETECTION_CONFIG
    patterns: list[PaydayPattern] = []
    for payee_key, txns in group_by_payee(transactions).items():
        pattern = _build_pattern(txns, config)
        if pattern is None:
            logger.debug("No payday pattern payee=%s deposits=%d", payee_key, len(txns))
            continue
        patterns.append(pattern)

    patterns.sort(key=lambda p: (-p.confidence, -p.average_amount, p.payee))
    logger.debug("Payday detection complete patterns=%d", len(patterns))
    return patterns


def _semi_monthly_dates(year: int, month: int, anchors: list[int]) -> list[date]:
    last_day = days_in_month(year, month)
    return sorted({date(year, month, min(day, last_day)) for day in anchors})


def next_pay_date(pattern: PaydayPattern, current: date) -> date:
    """The pay date one cadence step after `current`."""
    frequency = PaydayFrequency(pattern.frequency)
    if frequency in (PaydayFrequency.WEEKLY, PaydayFrequency.BIWEEKLY):
        interval = pattern.interval_days or (7 if frequency == PaydayFrequency.WEEKLY else 14)
        return current + timedelta(days=interval)

    if frequency == PaydayFrequency.MONTHLY:
        return add_months(current, 1, pattern.day_of_month or pattern.last_occurrence.day)

    anchors = pattern.days_of_month or [1, 15]
    for candidate in _semi_monthly_dates(current.year, current.month, anchors):
        if candidate > current:
            return candidate
    following = add_months(current, 1, 1)
    return _semi_monthly_dates(following.year, following.month, anchors)[0]


def predict_next_payday(pattern: PaydayPattern, today: date) -> PaydayPrediction:
    pay_date = next_pay_date(pattern, pattern.last_occurrence)
    while pay_date < today:
        pay_date = next_pay_date(pattern, pay_date)
    return PaydayPrediction(
        pay_date=pay_date,
        expected_amount=pattern.average_amount,
        days_until=(pay_date - today).days,
    )


def _first_on_or_after(pattern: PaydayPattern, start: date) -> date:
    frequency = PaydayFrequency(pattern.frequency)
    if frequency in (PaydayFrequency.WEEKLY, PaydayFrequency.BIWEEKLY):
        # Stay aligned with the observed pay dates even when `start` precedes them.
        interval = pattern.interval_days or (7 if frequency == PaydayFrequency.WEEKLY else 14)
        offset = (start - pattern.last_occurrence).days
        steps = -(-offset // interval)
        return pattern.last_occurrence + timedelta(days=steps * interval)

    if frequency == PaydayFrequency.MONTHLY:
        anchor = pattern.day_of_month or pattern.last_occurrence.day
        pay_date = date(start.year, start.month, min(anchor, days_in_month(start.year, start.month)))
    else:
        pay_date = next_pay_date(pattern, date(start.year, start.month, 1) - timedelta(days=1))
    while pay_date < start:
        pay_date = next_pay_date(pattern, pay_date)
    return pay_date


def get_payday_schedule(pattern: PaydayPattern, start: date, end: date) -> list[PaydayPrediction]:
    """Expected pay dates inside [start, end]; `days_until` counts from `start`."""
    if start > end:
        raise ValueError("schedule start must be <= end")
    schedule: list[PaydayPrediction] = []
    pay_date = _first_on_or_after(pattern, start)
    while pay_date <= end:
        schedule.append(
            PaydayPrediction(
                pay_date=pay_date,
                expected_amount=pattern.average_amount,
                days_until=(pay_date - start).days,
            )
        )
        pay_date = next_pay_date(pattern, pay_date)
    return schedule

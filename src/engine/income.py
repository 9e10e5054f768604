from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from statistics import mean, pstdev
from typing import Iterable, Optional

from domain.income_schemas import DateWindow, IncomeEstimate, IncomeStream, IncomeTransaction
from domain.models import IncomeFrequency, IncomePattern
from engine._dates import month_end, month_start, whole_months_between
from engine.money import round_half_up
from engine.payday import PaydayDetectionConfig, detect_cadence, group_by_payee, is_qualifying_income

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomeEstimationConfig:
    # Coefficient of variation above which a regular stream counts as freelance.
    variance_threshold: float = 0.15
    occurrence_cap: int = 4
    regular_frequency_factor: float = 0.95
    irregular_frequency_factor: float = 0.3
    cadence: PaydayDetectionConfig = field(default_factory=PaydayDetectionConfig)


DEFAULT_ESTIMATION_CONFIG = IncomeEstimationConfig()


def coefficient_of_variation(amounts: list[int]) -> float:
    if len(amounts) < 2:
        return 0.0
    average = mean(amounts)
    if average == 0:
        return 0.0
    return pstdev(amounts) / abs(average)


def _classify(frequency: IncomeFrequency, variance: float, config: IncomeEstimationConfig) -> IncomePattern:
    if frequency == IncomeFrequency.IRREGULAR:
        return IncomePattern.IRREGULAR
    if variance > config.variance_threshold:
        return IncomePattern.FREELANCE
    return IncomePattern.SALARY


def classify_income_pattern(stream: IncomeStream, config: Optional[IncomeEstimationConfig] = None) -> IncomePattern:
    """salary: regular and steady; freelance: regular timing, varying amounts; irregular otherwise."""
    config = config or DEFAULT_ESTIMATION_CONFIG
    return _classify(IncomeFrequency(stream.frequency), stream.amount_variance, config)


def detect_income_streams(
    transactions: Iterable[IncomeTransaction],
    config: Optional[IncomeEstimationConfig] = None,
) -> list[IncomeStream]:
    config = config or DEFAULT_ESTIMATION_CONFIG
    streams: list[IncomeStream] = []
    for txns in group_by_payee(transactions).values():
        if len(txns) < 2:
            continue
        amounts = [t.amount for t in txns]
        dates = sorted({t.posted_on for t in txns})
        cadence = detect_cadence(dates, config.cadence)
        frequency = IncomeFrequency(cadence[0].value) if cadence else IncomeFrequency.IRREGULAR
        variance = round(coefficient_of_variation(amounts), 2)
        streams.append(
            IncomeStream(
                payee=txns[0].payee,
                average_amount=round_half_up(Decimal(sum(amounts)) / len(amounts)),
                total_amount=sum(amounts),
                frequency=frequency,
                pattern=_classify(frequency, variance, config),
                occurrences=len(txns),
                amount_variance=variance,
                last_seen=dates[-1],
            )
        )
    streams.sort(key=lambda s: (-s.average_amount, s.payee))
    return streams


def stream_confidence(stream: IncomeStream, config: Optional[IncomeEstimationConfig] = None) -> float:
    config = config or DEFAULT_ESTIMATION_CONFIG
    occurrence_factor = min(stream.occurrences / config.occurrence_cap, 1.0)
    variance_factor = max(0.0, 1.0 - stream.amount_variance)
    frequency_factor = (
        config.irregular_frequency_factor
        if stream.frequency == IncomeFrequency.IRREGULAR
        else config.regular_frequency_factor
    )
    return occurrence_factor * variance_factor * frequency_factor


def estimate_monthly_income(
    transactions: Iterable[IncomeTransaction],
    window_start: Optional[date] = None,
    window_end: Optional[date] = None,
    config: Optional[IncomeEstimationConfig] = None,
) -> IncomeEstimate:
    """
    Average monthly income over a window.

    A missing bound defaults to the edge of the calendar month holding the
    first (or last) qualifying deposit, so three monthly paychecks span three
    months. A defaulted bound never crosses the supplied one. The total is
    divided by the whole calendar months inside the window, never by less than
    one, so a two-week sample is not blown up into a monthly figure.
    Confidence is the stream confidence weighted by each stream's share of the
    window's income; one-off deposits contribute weight but no confidence.
    """
    config = config or DEFAULT_ESTIMATION_CONFIG
    qualifying = sorted((t for t in transactions if is_qualifying_income(t)), key=lambda t: t.posted_on)

    start = window_start
    if start is None:
        start = month_start(qualifying[0].posted_on) if qualifying else window_end
    end = window_end
    if end is None:
        end = month_end(qualifying[-1].posted_on) if qualifying else window_start
    if start is None or end is None:
        return IncomeEstimate(monthly_estimate=0, total_income=0, months_spanned=0, sample_count=0, confidence=0.0)

    if window_start is None:
        start = min(start, end)
    if window_end is None:
        end = max(end, start)

    window = DateWindow(start=start, end=end)
    in_window = [t for t in qualifying if window.start <= t.posted_on <= window.end]
    total_income = sum(t.amount for t in in_window)
    months_spanned = max(1, whole_months_between(window.start, window.end))
    streams = detect_income_streams(in_window, config)

    confidence = 0.0
    if total_income > 0:
        weighted = sum(stream_confidence(s, config) * s.total_amount for s in streams)
        confidence = round(weighted / total_income, 2)

    estimate = IncomeEstimate(
        monthly_estimate=round_half_up(Decimal(total_income) / months_spanned),
        total_income=total_income,
        months_spanned=months_spanned,
        sample_count=len(in_window),
        confidence=confidence,
        window=window,
        streams=streams,
    )
    logger.debug(
        "Income estimate window=%s..%s samples=%d months=%d monthly=%d",
        window.start.isoformat(),
        window.end.isoformat(),
        estimate.sample_count,
        months_spanned,
        estimate.monthly_estimate,
    )
    return estimate

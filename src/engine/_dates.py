from __future__ import annotations

from calendar import monthrange
from datetime import date, timedelta


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def month_start(value: date) -> date:
    return value.replace(day=1)


def month_end(value: date) -> date:
    return value.replace(day=days_in_month(value.year, value.month))


def add_months(value: date, months: int, anchor_day: int | None = None) -> date:
    """
    Move `value` by whole calendar months, keeping `anchor_day` where the
    target month allows it and clamping to month end otherwise
    (Jan 31 -> Feb 28 -> Mar 31 when anchored on 31).
    """
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = anchor_day if anchor_day is not None else value.day
    return date(year, month, min(day, days_in_month(year, month)))


def month_difference(start: date, end: date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def whole_months_between(start: date, end: date) -> int:
    """Number of complete calendar months inside the inclusive range [start, end]."""
    if end < start:
        return 0
    stop = end + timedelta(days=1)
    months = max(month_difference(start, stop), 0)
    while months > 0 and add_months(start, months) > stop:
        months -= 1
    return months


def parse_month(month: str) -> tuple[int, int]:
    year_text, month_text = month.split("-", 1)
    return int(year_text), int(month_text)


def shift_month(month: str, months: int) -> str:
    year, month_number = parse_month(month)
    shifted = add_months(date(year, month_number, 1), months)
    return f"{shifted.year:04d}-{shifted.month:02d}"

"""Date manipulation utilities for billing cycles"""

import calendar
from datetime import date


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month"""
    return calendar.monthrange(year, month)[1]


def clamp_day_of_month(day_of_month) -> int:
    """Coerce a statement/due day into 1-31"""
    try:
        day = int(day_of_month)
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(1, min(day, 31))


def day_in_month(year: int, month: int, day_of_month: int) -> date:
    """Build a date, clamping the day to the month's last valid day (31 in April -> 30)"""
    return date(year, month, min(day_of_month, days_in_month(year, month)))


def add_months(from_date: date, months: int, day_of_month: int | None = None) -> date:
    """Shift by whole months, keeping day_of_month (default: from_date.day) clamped to month end"""
    index = from_date.month - 1 + months
    year = from_date.year + index // 12
    month = index % 12 + 1
    return day_in_month(year, month, day_of_month or from_date.day)


def next_occurrence(day_of_month: int, reference_date: date) -> date:
    """
    Next date falling on day_of_month, on or after reference_date.

    The candidate in the reference month is returned as-is when it is today
    or later, otherwise the same day in the following month is used. Both
    candidates are clamped to the month's length:

        next_occurrence(31, date(2025, 2, 15)) -> date(2025, 2, 28)
        next_occurrence(10, date(2025, 1, 31)) -> date(2025, 2, 10)
    """
    day = clamp_day_of_month(day_of_month)
    candidate = day_in_month(reference_date.year, reference_date.month, day)

    if candidate >= reference_date:
        return candidate

    return add_months(reference_date, 1, day)


def days_between(start: date, end: date) -> int:
    """Signed whole days from start to end"""
    return (end - start).days

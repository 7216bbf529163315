"""Unit tests for billing-cycle date resolution"""

from datetime import date

import pytest
from cardtempo.utils.date_utils import (
    add_months,
    clamp_day_of_month,
    days_between,
    days_in_month,
    next_occurrence,
)


def test_next_occurrence_later_this_month():
    assert next_occurrence(25, date(2025, 1, 10)) == date(2025, 1, 25)


def test_next_occurrence_today_is_not_past():
    """A statement closing today is still upcoming"""
    assert next_occurrence(15, date(2025, 1, 15)) == date(2025, 1, 15)


def test_next_occurrence_rolls_to_next_month():
    assert next_occurrence(10, date(2025, 1, 31)) == date(2025, 2, 10)
    assert next_occurrence(5, date(2025, 12, 20)) == date(2026, 1, 5)


def test_next_occurrence_clamps_to_month_end():
    """Day 31 in a short month lands on its last day"""
    assert next_occurrence(31, date(2025, 2, 15)) == date(2025, 2, 28)
    assert next_occurrence(31, date(2024, 2, 15)) == date(2024, 2, 29)
    assert next_occurrence(31, date(2025, 4, 1)) == date(2025, 4, 30)


def test_next_occurrence_clamps_after_rollover():
    """Rolling past Jan 30 into February clamps again"""
    assert next_occurrence(30, date(2025, 1, 31)) == date(2025, 2, 28)


@pytest.mark.parametrize("day", range(1, 32))
def test_next_occurrence_never_in_the_past(day):
    reference = date(2025, 3, 17)
    result = next_occurrence(day, reference)
    assert result >= reference
    assert days_between(reference, result) <= 31


def test_clamp_day_of_month():
    assert clamp_day_of_month(0) == 1
    assert clamp_day_of_month(45) == 31
    assert clamp_day_of_month(None) == 1
    assert clamp_day_of_month("12") == 12


def test_add_months_keeps_day_when_possible():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2025, 11, 15), 2) == date(2026, 1, 15)
    assert add_months(date(2025, 2, 28), 1, day_of_month=31) == date(2025, 3, 31)


def test_days_in_month():
    assert days_in_month(2025, 2) == 28
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2025, 12) == 31

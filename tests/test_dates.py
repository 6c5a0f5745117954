"""
Tests for date difference and age.

difference() returns three independent approximations; age() is an exact
calendar breakdown. The tests pin both behaviours.
"""

import datetime

import pytest

from techsolve.dates import Age, DateDifference, age, days_in_previous_month, difference
from techsolve.errors import InvalidExpression


class TestDifference:
    def test_figures_are_independent_approximations(self):
        result = difference("2023-01-01", "2024-02-05")
        assert result == DateDifference(days=400, months=13, years=1)
        assert str(result) == "400d | 13m | 1y"

    def test_order_does_not_matter(self):
        assert difference("2024-03-01", "2024-01-01") == difference("2024-01-01", "2024-03-01")

    def test_same_day(self):
        assert difference("2024-05-05", "2024-05-05") == DateDifference(0, 0, 0)

    def test_partial_days_are_dropped(self):
        assert difference("2024-01-01T00:00", "2024-01-02T23:59").days == 1

    def test_month_and_year_thresholds(self):
        assert difference("2024-01-01", "2024-01-31").months == 0   # 30 days
        assert difference("2024-01-01", "2024-02-01").months == 1   # 31 days
        assert difference("2023-01-01", "2024-01-01").years == 0    # 365 days
        assert difference("2023-01-01", "2024-01-02").years == 1    # 366 days

    def test_invalid_date(self):
        with pytest.raises(InvalidExpression):
            difference("not a date", "2024-01-01")


class TestAge:
    def test_day_borrow(self):
        assert age("2000-06-15", today=datetime.date(2024, 6, 14)) == Age(years=23, months=11, days=30)

    def test_exact_birthday(self):
        assert age("2000-06-15", today=datetime.date(2024, 6, 15)) == Age(24, 0, 0)

    def test_borrows_days_of_previous_month(self):
        # March 2024 borrows February's 29 days
        assert age("2024-01-20", today=datetime.date(2024, 3, 10)) == Age(0, 1, 19)

    def test_month_borrow(self):
        assert age("1990-11-20", today=datetime.date(2024, 2, 25)) == Age(33, 3, 5)

    def test_format(self):
        assert str(Age(23, 11, 30)) == "23y 11m 30d"

    def test_defaults_to_today(self):
        assert age(datetime.date.today()) == Age(0, 0, 0)


def test_days_in_previous_month():
    assert days_in_previous_month(datetime.date(2024, 3, 10)) == 29
    assert days_in_previous_month(datetime.date(2024, 1, 10)) == 31
    assert days_in_previous_month(datetime.date(2023, 5, 1)) == 30

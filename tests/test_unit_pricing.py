from datetime import date
from decimal import Decimal

import pytest

from agrirent.services.common import is_valid_range, overlap, total_price
from agrirent.utils.filters import fmt_price


@pytest.mark.parametrize("d", ["2024-01-01", "2024-02-29", "2030-12-31"])
def test_single_day_range_is_valid(d):
    assert is_valid_range(d, d)


def test_reversed_range_is_invalid():
    assert not is_valid_range("2024-01-05", "2024-01-01")


@pytest.mark.parametrize("start,end", [
    ("bad", "2024-01-03"),
    ("2024-01-01", ""),
    ("2023-02-30", "2023-03-01"),  # not a calendar date
    (None, "2024-01-01"),
])
def test_unparseable_dates_are_invalid_not_errors(start, end):
    assert is_valid_range(start, end) is False


def test_time_suffix_is_ignored():
    assert is_valid_range("2024-01-01T10:00:00", "2024-01-01")


def test_one_day_costs_one_daily_rate():
    assert total_price(100, "2024-01-01", "2024-01-01") == Decimal("100")


def test_days_are_inclusive():
    assert total_price(100, "2024-01-01", "2024-01-03") == Decimal("300")


def test_price_across_month_end():
    assert total_price(Decimal("500"), "2024-03-01", "2024-03-04") == Decimal("2000")
    assert total_price(10, "2024-02-28", "2024-03-01") == Decimal("30")  # leap year


def test_bad_dates_cost_nothing():
    assert total_price(100, "bad", "2024-01-03") == Decimal("0")


def test_price_keeps_full_precision():
    # Rounded only when displayed
    price = total_price("333.335", "2024-01-01", "2024-01-04")
    assert price == Decimal("1333.340")
    assert total_price("0.125", "2024-01-01", "2024-01-01") == Decimal("0.125")
    assert fmt_price(Decimal("0.125")) == "0.13"


def test_negative_rate_floors_at_zero():
    assert total_price(-50, "2024-01-01", "2024-01-02") == Decimal("0")


def test_overlap_closed_intervals():
    d = date
    # Sharing the boundary day counts as overlap
    assert overlap(d(2024, 3, 1), d(2024, 3, 4), d(2024, 3, 4), d(2024, 3, 6))
    assert overlap(d(2024, 3, 3), d(2024, 3, 5), d(2024, 3, 1), d(2024, 3, 4))
    # Containment
    assert overlap(d(2024, 3, 2), d(2024, 3, 2), d(2024, 3, 1), d(2024, 3, 4))
    # Adjacent days do not overlap
    assert not overlap(d(2024, 3, 5), d(2024, 3, 6), d(2024, 3, 1), d(2024, 3, 4))
    assert not overlap(d(2024, 2, 1), d(2024, 2, 29), d(2024, 3, 1), d(2024, 3, 4))


def test_fmt_price():
    assert fmt_price(Decimal("2000")) == "2000.00"
    assert fmt_price("n/a") == "n/a"
    assert fmt_price(None) == ""

"""Tests for amount parsing and the BHS week calendar."""

from datetime import date
from decimal import Decimal

import pytest

from arrecon.utils.amount_parser import parse_amount, parse_optional_amount
from arrecon.utils.bhs_week import bhs_week, bhs_week_range, next_bhs_week


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(50.00)", Decimal("-50.00")),
        ("1,234.56 SAR", Decimal("1234.56")),
        (" 7 ", Decimal("7")),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", "12..5", "NaN", "Infinity"])
def test_parse_amount_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_amount(raw)


def test_parse_optional_amount_treats_blank_as_zero():
    assert parse_optional_amount(None) == Decimal("0")
    assert parse_optional_amount("  ") == Decimal("0")
    assert parse_optional_amount("10.5") == Decimal("10.5")


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2025, 1, 1), (2025, 1)),
        (date(2025, 1, 7), (2025, 1)),
        (date(2025, 1, 8), (2025, 2)),
        (date(2024, 12, 28), (2024, 52)),
        (date(2024, 12, 30), (2024, 53)),
        (date(2025, 1, 2), (2025, 1)),
        (date(2025, 12, 31), (2025, 53)),
    ],
)
def test_bhs_week(day, expected):
    assert bhs_week(day) == expected


def test_bhs_week_range_clamps_final_week():
    assert bhs_week_range(2025, 1) == (date(2025, 1, 1), date(2025, 1, 7))
    assert bhs_week_range(2024, 52) == (date(2024, 12, 23), date(2024, 12, 29))
    assert bhs_week_range(2024, 53) == (date(2024, 12, 30), date(2024, 12, 31))
    assert bhs_week_range(2025, 53) == (date(2025, 12, 31), date(2025, 12, 31))


def test_next_bhs_week_resets_on_new_year():
    assert next_bhs_week(2025, 5) == (2025, 6)
    assert next_bhs_week(2024, 52) == (2024, 53)
    assert next_bhs_week(2024, 53) == (2025, 1)

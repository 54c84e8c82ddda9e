"""
Tests for formatting helpers.
"""
from datetime import date
from decimal import Decimal
from tripboard.core.utils import format_amount, format_date_short, format_error, percent, to_decimal


def test_format_error_envelope():
    assert format_error("Trip not found") == {"error": "Trip not found"}
    assert format_error("Bad amount", {"amount": -5}) == {"error": "Bad amount", "details": {"amount": -5}}


def test_short_date_and_amount():
    assert format_date_short(date(2025, 3, 5)) == "Mar 5, 2025"
    assert format_date_short(None) == "-"
    assert format_amount(Decimal("3.5")) == "3.50"


def test_percent_rounds_half_up():
    assert percent(1, 8) == 13
    assert percent(5, 0) == 0


def test_to_decimal_rejects_non_numbers():
    assert to_decimal("12.50") == Decimal("12.50")
    assert to_decimal(True) is None
    assert to_decimal("abc") is None
    assert to_decimal("NaN") is None

"""Tests for amount parsing utilities."""

import pytest
from kea.utils.amount_parser import format_cents, parse_amount


@pytest.mark.parametrize(
    "text,cents",
    [
        ("123.45", 12345),
        ("$123.45", 12345),
        ("-123.45", -12345),
        ("-$123.45", -12345),
        ("1,234.56", 123456),
        ("(123.45)", -12345),
        ("42", 4200),
        ("0.5", 50),
        ("0.005", 1),
        ("€10", 1000),
    ],
)
def test_parse_amount(text, cents):
    assert parse_amount(text) == cents


@pytest.mark.parametrize("text", ["", "   ", "abc", "12.3.4", "nan", "inf"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_format_cents():
    assert format_cents(123456) == "1234.56"
    assert format_cents(-5) == "-0.05"
    assert format_cents(0, "USD") == "0.00 USD"

from __future__ import annotations

import pytest

from core.formatters import format_currency, format_dollar_value, format_percentage


@pytest.mark.parametrize(
    "value, expected",
    [
        (2_500_000, "$2.5M"),
        ("1500", "$1.5K"),
        (999, "$999"),
        (None, "$0"),
        ("abc", "$0"),
        (float("nan"), "$0"),
    ],
)
def test_format_currency(value, expected):
    assert format_currency(value) == expected


def test_format_dollar_value():
    assert format_dollar_value(1234.56) == "$1,235"
    assert format_dollar_value(-20) == "-$20"
    assert format_dollar_value(None) == "$0"


def test_format_percentage():
    assert format_percentage(12.345) == "12.3%"
    assert format_percentage("25.00", decimals=2) == "25.00%"
    assert format_percentage(None) == "N/A"

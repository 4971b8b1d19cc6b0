"""Test CSS color parsing.

Tests for inkpad.utils.color:
    - Named, hex and functional colors
    - Fractional / percentage alpha in rgba()
    - "transparent"
    - Unknown colors raise ValueError

Run:
    pytest tests/test_color.py -v
"""

import pytest

from inkpad.utils.color import parse_color


@pytest.mark.parametrize("value, expected", [
    ("black", (0.0, 0.0, 0.0, 1.0)),
    ("White", (1.0, 1.0, 1.0, 1.0)),
    ("#f00", (1.0, 0.0, 0.0, 1.0)),
    ("#00ff00", (0.0, 1.0, 0.0, 1.0)),
    ("#0000ff80", (0.0, 0.0, 1.0, 128 / 255)),
    ("rgb(255, 0, 0)", (1.0, 0.0, 0.0, 1.0)),
    ("transparent", (0.0, 0.0, 0.0, 0.0)),
    ("  navy  ", (0.0, 0.0, 128 / 255, 1.0)),
])
def test_parse_color(value, expected):
    assert parse_color(value) == pytest.approx(expected)


def test_rgba_fractional_alpha():
    assert parse_color("rgba(0,0,0,0.5)") == pytest.approx((0.0, 0.0, 0.0, 0.5))


def test_rgba_zero_alpha():
    assert parse_color("rgba(0,0,0,0)") == (0.0, 0.0, 0.0, 0.0)


def test_rgba_percent_alpha():
    assert parse_color("rgba(255, 255, 255, 25%)") == pytest.approx((1.0, 1.0, 1.0, 0.25))


def test_rgba_alpha_clamped():
    assert parse_color("rgba(0,0,0,3)")[3] == 1.0


@pytest.mark.parametrize("value", ["blurple", "#12345", "rgb(1,2)", ""])
def test_unknown_color(value):
    with pytest.raises(ValueError):
        parse_color(value)

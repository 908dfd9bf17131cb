"""
Unit tests for numeric helpers
"""

import math
import pytest

from pickem.utils.numbers import is_finite_number, parse_line, percentage, round_half_up


class TestParseLine:
    """Lenient parsing of spread/total lines."""

    @pytest.mark.parametrize("raw, expected", [
        (-3.5, -3.5),
        (7, 7.0),
        ("-3.5", -3.5),
        ("+7", 7.0),
        ("O 47", 47.0),
        ("U 44.5", 44.5),
        ("KC -2.5 (-110)", -2.5),
        (".5", 0.5),
        ("0", 0.0),
    ])
    def test_parses_numbers(self, raw, expected):
        assert parse_line(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "PK", "n/a", True, math.nan, math.inf])
    def test_unparseable_is_absent(self, raw):
        """Garbage degrades to None, never to 0 and never raises."""
        assert parse_line(raw) is None

    def test_zero_line_is_not_absent(self):
        assert parse_line(0) == 0.0
        assert parse_line("0.0") is not None


class TestPercentage:
    def test_two_of_three_rounds_to_one_decimal(self):
        assert percentage(2, 3) == 66.7

    def test_zero_denominator(self):
        assert percentage(0, 0) == 0.0

    def test_half_up(self):
        # 1/8 = 12.5 exactly, 1/16 = 6.25 -> 6.3 (not banker's 6.2)
        assert percentage(1, 8) == 12.5
        assert percentage(1, 16) == 6.3

    def test_round_half_up(self):
        assert round_half_up(66.65) == 66.7
        assert round_half_up(0.05) == 0.1


class TestIsFiniteNumber:
    def test_values(self):
        assert is_finite_number(0)
        assert is_finite_number(21.0)
        assert not is_finite_number(None)
        assert not is_finite_number(math.nan)
        assert not is_finite_number("21")
        assert not is_finite_number(True)

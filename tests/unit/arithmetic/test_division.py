"""Tests for divide, divide_integer, remainder and remainder_near."""

import pytest

from decarith.arithmetic import divide, divide_integer, remainder, remainder_near
from decarith.context import Signal
from tests.helpers import ROUNDED_INEXACT, D


class TestDivide:
    """Tests for divide."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("1", "3", "0.333333333"),
            ("2", "3", "0.666666667"),
            ("5", "2", "2.5"),
            ("1", "10", "0.1"),
            ("12", "12", "1"),
            ("8.00", "2", "4.00"),
            ("2.400", "2", "1.200"),
            ("1000", "100", "10"),
            ("2.40E+6", "2", "1.20E+6"),
            ("1", "1024", "0.0009765625"),
            ("-7", "2", "-3.5"),
        ],
    )
    def test_values(self, a, b, expected, ctx):
        """Exact quotients take the ideal exponent; others round."""
        assert str(divide(D(a), D(b), ctx)) == expected

    def test_exact_quotient_sets_no_flags(self, ctx):
        """An exact quotient is not reported as rounded."""
        divide(D("1"), D("4"), ctx)
        assert ctx.flags == set()

    def test_inexact_quotient(self, ctx):
        """Repeating quotients are rounded and inexact."""
        divide(D("1"), D("3"), ctx)
        assert ctx.flags == ROUNDED_INEXACT

    def test_division_by_zero(self, ctx):
        """Finite / 0 is a signed infinity."""
        assert str(divide(D("1"), D("0"), ctx)) == "Infinity"
        assert str(divide(D("-1"), D("0.00"), ctx)) == "-Infinity"
        assert ctx.flags == {Signal.DIVISION_BY_ZERO}

    def test_zero_by_zero(self, ctx):
        """0 / 0 is invalid, not a division by zero."""
        assert divide(D("0"), D("-0"), ctx).is_nan
        assert ctx.flags == {Signal.INVALID_OPERATION}

    def test_zero_dividend(self, ctx):
        """0 / x keeps the ideal exponent and the combined sign."""
        assert str(divide(D("0.00"), D("5"), ctx)) == "0.00"
        assert str(divide(D("0"), D("-5"), ctx)) == "-0"

    def test_infinities(self, ctx):
        """Infinite operands."""
        assert str(divide(D("Inf"), D("-2"), ctx)) == "-Infinity"
        assert divide(D("Inf"), D("Inf"), ctx).is_nan
        assert Signal.INVALID_OPERATION in ctx.flags

    def test_by_infinity(self, ctx):
        """x / Inf is a zero at e_tiny."""
        result = divide(D("5"), D("Inf"), ctx)
        assert result.to_abstract() == "[0,0,-107]"
        assert Signal.CLAMPED in ctx.flags


class TestDivideInteger:
    """Tests for divide_integer."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("2", "3", "0"),
            ("10", "3", "3"),
            ("1", "0.3", "3"),
            ("-7", "2", "-3"),
            ("0.5", "3", "0"),
            ("1E-10", "1", "0"),
            ("0", "7", "0"),
        ],
    )
    def test_values(self, a, b, expected, ctx):
        """Quotients are truncated toward zero with exponent 0."""
        assert str(divide_integer(D(a), D(b), ctx)) == expected

    def test_quotient_too_large(self, ctx):
        """Quotients needing more than precision digits are invalid."""
        assert divide_integer(D("1E+9"), D("1"), ctx).is_nan
        assert ctx.flags == {Signal.INVALID_OPERATION}

    def test_division_by_zero(self, ctx):
        """x // 0 follows divide; 0 // 0 is invalid."""
        assert str(divide_integer(D("1"), D("0"), ctx)) == "Infinity"
        assert ctx.flags == {Signal.DIVISION_BY_ZERO}
        assert divide_integer(D("0"), D("0"), ctx).is_nan
        assert Signal.INVALID_OPERATION in ctx.flags

    def test_infinities(self, ctx):
        """Infinite operands."""
        assert str(divide_integer(D("-Inf"), D("3"), ctx)) == "-Infinity"
        assert str(divide_integer(D("5"), D("-Inf"), ctx)) == "-0"
        assert divide_integer(D("Inf"), D("Inf"), ctx).is_nan


class TestRemainder:
    """Tests for remainder."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("2.1", "3", "2.1"),
            ("10", "3", "1"),
            ("-10", "3", "-1"),
            ("10.2", "1", "0.2"),
            ("10", "0.3", "0.1"),
            ("3.6", "1.3", "1.0"),
            ("0.001", "1", "0.001"),
            ("-0", "3", "-0"),
        ],
    )
    def test_values(self, a, b, expected, ctx):
        """The remainder has the sign of the dividend."""
        assert str(remainder(D(a), D(b), ctx)) == expected

    def test_invalid_cases(self, ctx):
        """Infinite dividend, zero divisor and huge quotients are invalid."""
        assert remainder(D("Inf"), D("1"), ctx).is_nan
        assert remainder(D("1"), D("0"), ctx).is_nan
        assert remainder(D("0"), D("0"), ctx).is_nan
        assert remainder(D("1E+10"), D("3"), ctx).is_nan
        assert ctx.flags == {Signal.INVALID_OPERATION}

    def test_infinite_divisor(self, ctx):
        """x rem Inf is x."""
        assert str(remainder(D("5"), D("-Inf"), ctx)) == "5"


class TestRemainderNear:
    """Tests for remainder_near."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("10", "6", "-2"),
            ("10", "3", "1"),
            ("10", "4", "2"),
            ("3.6", "1.3", "-0.3"),
            ("10.2", "1", "0.2"),
            ("7.7", "8", "-0.3"),
            ("0.001", "1", "0.001"),
            ("-10", "6", "2"),
        ],
    )
    def test_values(self, a, b, expected, ctx):
        """The quotient is rounded to nearest, ties to even."""
        assert str(remainder_near(D(a), D(b), ctx)) == expected

    def test_invalid_cases(self, ctx):
        """Same invalid cases as remainder."""
        assert remainder_near(D("-Inf"), D("1"), ctx).is_nan
        assert remainder_near(D("1"), D("0"), ctx).is_nan
        assert remainder_near(D("1E+10"), D("3"), ctx).is_nan
        assert ctx.flags == {Signal.INVALID_OPERATION}

    def test_zero_and_infinite_divisor(self, ctx):
        """Zero dividends and infinite divisors."""
        assert str(remainder_near(D("0.00"), D("3"), ctx)) == "0.00"
        assert str(remainder_near(D("2.5"), D("Inf"), ctx)) == "2.5"

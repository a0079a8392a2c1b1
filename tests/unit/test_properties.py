"""Cross-cutting properties that hold over the sample values."""

import itertools

import pytest

from decarith.arithmetic import add, divide, multiply, plus, quantize, subtract
from decarith.comparison import compare
from decarith.context import Rounding, Signal
from decarith.conversion import parse_literal
from decarith.rounding import round_to_context
from tests.helpers import (
    ALL_ROUNDINGS,
    SAMPLE_FINITE,
    SAMPLE_SPECIAL,
    D,
    make_context,
)

PAIRS = list(itertools.combinations(SAMPLE_FINITE, 2))


class TestCommutativity:
    """Addition and multiplication do not depend on operand order."""

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_add(self, a, b):
        """a + b and b + a agree in value, exponent and flags."""
        first, second = make_context(), make_context()
        forward = add(D(a), D(b), first)
        backward = add(D(b), D(a), second)
        assert forward.to_abstract() == backward.to_abstract()
        assert first.flags == second.flags

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_multiply(self, a, b):
        """a * b and b * a agree in value, exponent and flags."""
        first, second = make_context(), make_context()
        forward = multiply(D(a), D(b), first)
        backward = multiply(D(b), D(a), second)
        assert forward.to_abstract() == backward.to_abstract()
        assert first.flags == second.flags


class TestRoundingIdempotence:
    """Rounding a rounded value changes nothing."""

    @pytest.mark.parametrize("rounding", ALL_ROUNDINGS)
    @pytest.mark.parametrize("literal", SAMPLE_FINITE)
    def test_second_rounding_is_exact(self, literal, rounding):
        """The second pass is exact; only SUBNORMAL may be raised again."""
        ctx = make_context(precision=3, rounding=rounding)
        once = round_to_context(D(literal), ctx)
        ctx.clear_flags()
        twice = round_to_context(once, ctx)
        assert twice.to_abstract() == once.to_abstract()
        assert ctx.flags <= {Signal.SUBNORMAL}


class TestQuantizeIdempotence:
    """Quantizing twice to the same exponent changes nothing."""

    @pytest.mark.parametrize(
        "rounding",
        [Rounding.HALF_EVEN, Rounding.DOWN, Rounding.CEILING, Rounding.FLOOR],
    )
    @pytest.mark.parametrize("target", ["0.01", "1", "1E+2", "1E-5"])
    @pytest.mark.parametrize("literal", SAMPLE_FINITE)
    def test_second_quantize_is_exact(self, literal, target, rounding):
        """The second pass returns the same representation without rounding."""
        ctx = make_context(rounding=rounding)
        once = quantize(D(literal), D(target), ctx)
        if once.is_nan:
            assert ctx.flags == {Signal.INVALID_OPERATION}
            return
        ctx.clear_flags()
        twice = quantize(once, D(target), ctx)
        assert twice.to_abstract() == once.to_abstract()
        assert ctx.flags <= {Signal.SUBNORMAL}


class TestStringRoundTrip:
    """to_sci_string output parses back to the same representation."""

    @pytest.mark.parametrize("literal", SAMPLE_FINITE + SAMPLE_SPECIAL)
    def test_scientific(self, literal):
        """Scientific strings preserve sign, coefficient and exponent."""
        value = D(literal)
        parsed = parse_literal(value.to_sci_string())
        assert parsed.to_abstract() == value.to_abstract()

    @pytest.mark.parametrize("literal", SAMPLE_FINITE)
    def test_engineering(self, literal):
        """Engineering strings preserve the numeric value."""
        value = D(literal)
        assert parse_literal(value.to_eng_string()) == value


class TestZeroSign:
    """Sign of exact zero results."""

    @pytest.mark.parametrize("rounding", ALL_ROUNDINGS)
    def test_cancellation(self, rounding):
        """x - x is +0, except -0 when rounding toward -Infinity."""
        ctx = make_context(rounding=rounding)
        result = subtract(D("1.5"), D("1.5"), ctx)
        assert result.is_zero
        assert result.sign is (rounding is Rounding.FLOOR)

    def test_negative_zeros(self, ctx):
        """-0 + -0 keeps the sign; -0 + 0 does not."""
        assert str(add(D("-0"), D("-0"), ctx)) == "-0"
        assert str(add(D("-0"), D("0"), ctx)) == "0"

    def test_negative_zeros_floor(self, floor_ctx):
        """Under FLOOR, -0 + 0 is -0."""
        assert str(add(D("-0"), D("0"), floor_ctx)) == "-0"

    def test_product_sign(self, ctx):
        """Zero products carry the exclusive-or of the operand signs."""
        assert str(multiply(D("-0"), D("5"), ctx)) == "-0"
        assert str(multiply(D("-0"), D("-5"), ctx)) == "0"


class TestOrdering:
    """compare agrees with the arithmetic."""

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_difference_sign(self, a, b, ctx):
        """compare(a, b) has the sign of a - b."""
        difference = subtract(D(a), D(b), make_context(precision=300))
        expected = 0 if difference.is_zero else (-1 if difference.sign else 1)
        assert compare(D(a), D(b), ctx) == expected


class TestDivisionExactness:
    """Exact quotients are exact and flag-free."""

    @pytest.mark.parametrize(
        "quotient,divisor",
        [
            ("7", "3"),
            ("1.25", "4"),
            ("-0.5", "12"),
            ("123456789", "1"),
            ("2.5", "-8"),
        ],
    )
    def test_multiply_then_divide(self, quotient, divisor, ctx):
        """(q * d) / d == q without rounding."""
        product = multiply(D(quotient), D(divisor), ctx)
        assert divide(product, D(divisor), ctx) == D(quotient)
        assert ctx.flags == set()


class TestZeroDigits:
    """Zero always reports one digit."""

    @pytest.mark.parametrize("literal", ["0", "-0", "0.000", "0E+10"])
    def test_digits(self, literal, ctx):
        """Digits of zero are 1 before and after rounding."""
        assert D(literal).digits == 1
        assert plus(D(literal), ctx).digits == 1

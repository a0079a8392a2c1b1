"""Tests for quantize."""

import pytest

from decarith.arithmetic import quantize
from decarith.comparison import same_quantum
from decarith.context import Rounding, Signal
from tests.helpers import ROUNDED_INEXACT, D, make_context


class TestQuantize:
    """Tests for quantize."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("2.17", "0.001", "2.170"),
            ("2.17", "0.01", "2.17"),
            ("2.17", "0.1", "2.2"),
            ("2.17", "1e+0", "2"),
            ("2.17", "1e+1", "0E+1"),
            ("-Inf", "Inf", "-Infinity"),
            ("-0.1", "1", "-0"),
            ("-0", "1e+5", "-0E+5"),
            ("217", "1e-1", "217.0"),
            ("217", "1e+0", "217"),
            ("217", "1e+1", "2.2E+2"),
            ("217", "1e+2", "2E+2"),
        ],
    )
    def test_values(self, a, b, expected, ctx):
        """The result takes the exponent of the second operand."""
        assert str(quantize(D(a), D(b), ctx)) == expected

    def test_padding_is_exact(self, ctx):
        """Lowering the exponent sets no flags."""
        quantize(D("2.17"), D("0.001"), ctx)
        assert ctx.flags == set()

    def test_rounding_flags(self, ctx):
        """Discarding non-zero digits is rounded and inexact."""
        quantize(D("2.17"), D("0.1"), ctx)
        assert ctx.flags == ROUNDED_INEXACT

    def test_uses_context_rounding(self):
        """Digits are discarded with the context rounding mode."""
        ctx = make_context(rounding=Rounding.DOWN)
        assert str(quantize(D("2.19"), D("0.1"), ctx)) == "2.1"

    @pytest.mark.parametrize("value", ["35236450.6", "-35236450.6"])
    def test_too_many_digits(self, value, ctx):
        """Results needing more than precision digits are invalid."""
        assert quantize(D(value), D("1e-2"), ctx).is_nan
        assert ctx.flags == {Signal.INVALID_OPERATION}

    def test_carry_past_precision(self):
        """A rounding carry that exceeds the precision is invalid."""
        ctx = make_context(precision=3)
        assert quantize(D("9.999"), D("0.01"), ctx).is_nan

    def test_infinity_mismatch(self, ctx):
        """Exactly one infinite operand is invalid."""
        assert quantize(D("2"), D("Inf"), ctx).is_nan
        assert quantize(D("Inf"), D("1"), ctx).is_nan
        assert ctx.flags == {Signal.INVALID_OPERATION}

    def test_exponent_out_of_range(self, ctx):
        """Target exponents outside [e_tiny, e_max] are invalid."""
        assert quantize(D("1"), D("1E+100"), ctx).is_nan
        assert quantize(D("1"), D("1E-108"), ctx).is_nan

    def test_subnormal_result(self, ctx):
        """Subnormal results are flagged."""
        result = quantize(D("1.23E-100"), D("1E-102"), ctx)
        assert str(result) == "1.23E-100"
        assert ctx.flags == {Signal.SUBNORMAL}

    def test_same_quantum(self, ctx):
        """Finite results share the quantum of the second operand."""
        for a, b in [("1.2345", "0.01"), ("17", "1E+1"), ("0", "0.000")]:
            assert same_quantum(quantize(D(a), D(b), ctx), D(b))

    def test_nan_operand(self, ctx):
        """NaN operands propagate."""
        assert str(quantize(D("NaN3"), D("1"), ctx)) == "NaN3"
        assert Signal.INVALID_OPERATION in ctx.flags

    def test_inexact_subnormal_result(self, ctx):
        """Rounding to a subnormal result never signals underflow."""
        result = quantize(D("1.234E-100"), D("1E-102"), ctx)
        assert str(result) == "1.23E-100"
        assert ctx.flags == {Signal.SUBNORMAL} | ROUNDED_INEXACT

    @pytest.mark.parametrize("rounding", [Rounding.HALF_EVEN, Rounding.DOWN])
    def test_far_below_target_exponent(self, rounding):
        """An operand many orders below the target rounds to zero at once."""
        ctx = make_context(rounding=rounding)
        result = quantize(D("1E-99999999999"), D("1"), ctx)
        assert result.to_abstract() == "[0,0,0]"
        assert ctx.flags == ROUNDED_INEXACT

    def test_far_below_target_exponent_rounds_up(self):
        """Directed rounding still sees the discarded digits."""
        ctx = make_context(rounding=Rounding.CEILING)
        result = quantize(D("4E-99999999999"), D("0.01"), ctx)
        assert str(result) == "0.01"

"""Exponential and logarithm functions.

These are computed in binary floating point and converted back, so results
are correct to roughly 15-17 significant digits whatever the context
precision. Logarithms keep the exponent term in decimal, so operands of any
magnitude are accepted. Special values, exact cases (exp(0), ln(1), log10 of
a power of ten) and the flag behaviour follow the decimal rules: every other
result sets INEXACT and ROUNDED.
"""

from __future__ import annotations

import math

import structlog

from decarith.arithmetic import fma
from decarith.context import Context, Signal
from decarith.conversion import to_sci_string
from decarith.rounding import quiet_nan, round_to_context
from decarith.value import Decimal

logger = structlog.get_logger()

__all__ = ["exp", "ln", "log10"]

# ln(10) to 30 digits, beyond the accuracy of the float terms it is combined with
LN10 = Decimal("2.30258509299404568401799145468")


def _gate(a: Decimal, context: Context) -> Decimal | None:
    if a.is_nan:
        context.set_flag(Signal.INVALID_OPERATION)
        return quiet_nan(a, context)
    return None


def _inexact(result: float, context: Context) -> Decimal:
    value = Decimal.from_float(result, context)
    context.set_flag(Signal.INEXACT)
    context.set_flag(Signal.ROUNDED)
    return value


def _scaled_log(
    log_coefficient: float, exponent: int, log_ten: Decimal, context: Context
) -> Decimal:
    """log_coefficient + exponent * log_ten with a single rounding.

    The exponent stays a Decimal so operands beyond the double range work.
    """
    result = fma(
        Decimal(exponent), log_ten, Decimal.from_float(log_coefficient), context
    )
    context.set_flag(Signal.INEXACT)
    context.set_flag(Signal.ROUNDED)
    return result


def _strip_zeros(a: Decimal) -> tuple[int, int]:
    coefficient, exponent = a.coefficient, a.exponent
    while coefficient % 10 == 0:
        coefficient //= 10
        exponent += 1
    return coefficient, exponent


def _log_domain(a: Decimal, context: Context) -> Decimal | None:
    """Result for logarithm operands outside (0, +Inf), else None."""
    nan = _gate(a, context)
    if nan is not None:
        return nan
    if a.is_zero:
        return Decimal.infinity(True)
    if a.sign:
        logger.debug("invalid_operation", reason="logarithm_of_negative")
        context.set_flag(Signal.INVALID_OPERATION)
        return Decimal.nan()
    if a.is_infinite:
        return a
    return None


def exp(a: Decimal, context: Context) -> Decimal:
    """e**a rounded to the context."""
    nan = _gate(a, context)
    if nan is not None:
        return nan
    if a.is_infinite:
        return Decimal.zero() if a.sign else a
    if a.is_zero:
        return Decimal(1)

    try:
        result = math.exp(float(to_sci_string(a)))
    except OverflowError:
        result = math.inf
    if math.isinf(result):
        logger.debug("float_overflow", operation="exp")
        # Any value above the range rounds to the context's overflow result
        return round_to_context(Decimal.finite(False, 1, context.e_max + 1), context)
    if result == 0.0:
        # Below the smallest double: round a value below the smallest subnormal
        return round_to_context(Decimal.finite(False, 1, context.e_tiny - 1), context)
    return _inexact(result, context)


def ln(a: Decimal, context: Context) -> Decimal:
    """Natural logarithm of a.

    ln(0) is -Infinity and ln(+Inf) is +Infinity; negative operands set
    INVALID_OPERATION.
    """
    special = _log_domain(a, context)
    if special is not None:
        return special
    coefficient, exponent = _strip_zeros(a)
    if coefficient == 1 and exponent == 0:
        return Decimal(0)
    return _scaled_log(math.log(coefficient), exponent, LN10, context)


def log10(a: Decimal, context: Context) -> Decimal:
    """Base-10 logarithm of a; exact for integral powers of ten."""
    special = _log_domain(a, context)
    if special is not None:
        return special

    coefficient, exponent = _strip_zeros(a)
    if coefficient == 1:
        return round_to_context(Decimal(exponent), context)
    return _scaled_log(math.log10(coefficient), exponent, Decimal(1), context)

"""Rounding engine.

`round_to_context` brings any value within a context's precision and exponent
range, recording ROUNDED, INEXACT, SUBNORMAL, UNDERFLOW, OVERFLOW and CLAMPED
in the context's flag register as it goes. Every arithmetic operation ends
with a call into this module unless it was asked for an unrounded result.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from decarith.context import Context, Rounding, Signal
from decarith.digits import num_digits, pow10, shift_right
from decarith.value import Decimal

logger = structlog.get_logger()

__all__ = [
    "RoundingResult",
    "should_increment",
    "round_digits",
    "max_finite",
    "min_normal",
    "min_subnormal",
    "overflow_result",
    "round_to_context",
    "round_with_status",
    "quiet_nan",
]


@dataclass(frozen=True)
class RoundingResult:
    """Outcome of rounding a value into a context.

    Attributes:
        value: The rounded value
        rounded: True if digits were discarded or the value was replaced
        inexact: True if the rounded value differs from the input
    """

    value: Decimal
    rounded: bool = False
    inexact: bool = False


# ============================================================================
# Coefficient rounding
# ============================================================================


def should_increment(
    rounding: Rounding, sign: bool, kept: int, remainder: int, divisor: int
) -> bool:
    """Decide whether the kept coefficient is bumped by one unit.

    Args:
        rounding: Rounding mode in effect
        sign: True when the value is negative
        kept: Coefficient after the low digits were removed
        remainder: Integer value of the removed digits
        divisor: 10**(number of removed digits), i.e. one unit of `kept`

    Returns:
        True if `kept` must be incremented
    """
    if remainder == 0:
        return False
    if rounding is Rounding.DOWN:
        return False
    if rounding is Rounding.UP:
        return True
    if rounding is Rounding.CEILING:
        return not sign
    if rounding is Rounding.FLOOR:
        return sign

    twice = 2 * remainder
    if rounding is Rounding.HALF_UP:
        return twice >= divisor
    if rounding is Rounding.HALF_DOWN:
        return twice > divisor
    # HALF_EVEN
    return twice > divisor or (twice == divisor and kept % 2 == 1)


def round_digits(
    coefficient: int, drop: int, rounding: Rounding, sign: bool
) -> tuple[int, bool]:
    """Remove the `drop` low digits of a coefficient, rounding the rest.

    The result may carry into an extra digit: 9996 with drop=1 gives 1000.

    Returns:
        (new coefficient, inexact)
    """
    if drop <= 0:
        return coefficient, False
    if drop > num_digits(coefficient) + 1:
        # Everything goes and the remainder is below half a unit: a one-digit
        # sticky value rounds identically
        coefficient, drop = (1 if coefficient else 0), 2
    kept, remainder = shift_right(coefficient, drop)
    if should_increment(rounding, sign, kept, remainder, pow10(drop)):
        kept += 1
    return kept, remainder != 0


# ============================================================================
# Limits
# ============================================================================


def max_finite(context: Context, sign: bool = False) -> Decimal:
    """Largest finite magnitude representable in the context."""
    return Decimal.finite(sign, pow10(context.precision) - 1, context.e_top)


def min_normal(context: Context, sign: bool = False) -> Decimal:
    """Smallest normal magnitude, 1E(e_min)."""
    return Decimal.finite(sign, 1, context.e_min)


def min_subnormal(context: Context, sign: bool = False) -> Decimal:
    return Decimal.finite(sign, 1, context.e_tiny)


def overflow_result(context: Context, sign: bool) -> Decimal:
    """Result substituted for an overflowing value under the rounding mode."""
    rounding = context.rounding
    if rounding is Rounding.DOWN:
        return max_finite(context, sign)
    if rounding is Rounding.CEILING:
        return max_finite(context, sign) if sign else Decimal.infinity(False)
    if rounding is Rounding.FLOOR:
        return Decimal.infinity(True) if sign else max_finite(context, sign)
    return Decimal.infinity(sign)


# ============================================================================
# Context rounding
# ============================================================================


def round_with_status(value: Decimal, context: Context) -> RoundingResult:
    """Round `value` into `context`, reporting what happened.

    Flags are written to `context` exactly as `round_to_context` does.
    """
    if not value.is_finite:
        return RoundingResult(value)

    if value.is_zero:
        return _clamp_zero(value, context)

    adjusted = value.adjusted_exponent
    subnormal = adjusted < context.e_min
    if subnormal:
        context.set_flag(Signal.SUBNORMAL)

    if adjusted > context.e_max:
        logger.debug(
            "decimal_overflow", adjusted_exponent=adjusted, e_max=context.e_max
        )
        context.set_flag(Signal.OVERFLOW)
        context.set_flag(Signal.INEXACT)
        context.set_flag(Signal.ROUNDED)
        return RoundingResult(overflow_result(context, value.sign), True, True)

    drop = value.digits - context.precision
    if value.exponent + drop < context.e_tiny:
        drop = context.e_tiny - value.exponent
    if drop <= 0:
        return RoundingResult(value)

    coefficient, inexact = round_digits(
        value.coefficient, drop, context.rounding, value.sign
    )
    exponent = value.exponent + drop
    context.set_flag(Signal.ROUNDED)
    if inexact:
        context.set_flag(Signal.INEXACT)

    if num_digits(coefficient) > context.precision:
        # Carry out of the top digit; the re-round is exact but may overflow
        carried = round_with_status(
            Decimal.finite(value.sign, coefficient, exponent), context
        )
        return RoundingResult(carried.value, True, inexact or carried.inexact)

    result = Decimal.finite(value.sign, coefficient, exponent)
    if subnormal and inexact:
        context.set_flag(Signal.UNDERFLOW)
        if coefficient == 0:
            context.set_flag(Signal.CLAMPED)
    return RoundingResult(result, True, inexact)


def round_to_context(value: Decimal, context: Context) -> Decimal:
    """Round `value` to the precision and exponent range of `context`.

    Args:
        value: Any decimal value (specials pass through unchanged)
        context: Context supplying the limits; flags are added to it

    Returns:
        The rounded value
    """
    return round_with_status(value, context).value


def _clamp_zero(value: Decimal, context: Context) -> RoundingResult:
    exponent = value.exponent
    if exponent < context.e_tiny:
        exponent = context.e_tiny
    elif exponent > context.e_max:
        exponent = context.e_max
    else:
        return RoundingResult(value)
    context.set_flag(Signal.CLAMPED)
    return RoundingResult(Decimal.zero(value.sign, exponent))


def quiet_nan(value: Decimal, context: Context) -> Decimal:
    """Quiet NaN carrying the sign and payload of NaN `value`.

    Payloads longer than ``precision - 1`` digits keep only their low-order
    digits.
    """
    payload = value.payload or 0
    limit = pow10(context.precision - 1)
    if payload >= limit:
        payload %= limit
    return Decimal.nan(value.sign, payload)

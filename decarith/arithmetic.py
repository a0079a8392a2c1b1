"""Arithmetic operations on decimal values.

Every operation takes its operands and a Context, returns a new Decimal, and
reports exceptional conditions only through the context's flag register:

- INVALID_OPERATION: NaN operands, undefined results (Inf - Inf, 0 * Inf,
  0 / 0), integer quotients that do not fit the precision, and similar
- DIVISION_BY_ZERO: finite non-zero dividend with a zero divisor
- the rounding flags, through decarith.rounding

Operand NaNs are handled uniformly: the first signaling NaN (or, failing
that, the first quiet NaN) sets INVALID_OPERATION and its sign and payload are
carried into a quiet NaN result.
"""

from __future__ import annotations

import structlog

from decarith.comparison import numeric_order
from decarith.context import Context, Rounding, Signal
from decarith.digits import num_digits, pow10, shift_left, shift_right
from decarith.rounding import (
    max_finite,
    quiet_nan,
    round_digits,
    round_to_context,
)
from decarith.value import Decimal

logger = structlog.get_logger()

__all__ = [
    # Core arithmetic
    "add",
    "subtract",
    "multiply",
    "fma",
    "divide",
    "divide_integer",
    "remainder",
    "remainder_near",
    "quantize",
    # Unary arithmetic
    "plus",
    "minus",
    "abs_value",
    "reduce",
    "scaleb",
    "logb",
    "round_to_integral_exact",
    "round_to_integral_value",
    # Adjacent values
    "next_plus",
    "next_minus",
    "next_toward",
    # Sign and digit manipulation
    "copy",
    "copy_abs",
    "copy_negate",
    "copy_sign",
    "shift",
    "rotate",
    # Classification
    "classify",
    "radix",
]


# ============================================================================
# Operand checks
# ============================================================================


def _invalid(context: Context, reason: str) -> Decimal:
    logger.debug("invalid_operation", reason=reason)
    context.set_flag(Signal.INVALID_OPERATION)
    return Decimal.nan()


def _check_nans(context: Context, *operands: Decimal) -> Decimal | None:
    """Quiet NaN result if any operand is a NaN, else None."""
    for operand in operands:
        if operand.is_signaling:
            logger.debug("invalid_operation", reason="signaling_nan")
            context.set_flag(Signal.INVALID_OPERATION)
            return quiet_nan(operand, context)
    for operand in operands:
        if operand.is_quiet:
            context.set_flag(Signal.INVALID_OPERATION)
            return quiet_nan(operand, context)
    return None


def _finish(value: Decimal, context: Context, rounded: bool) -> Decimal:
    return round_to_context(value, context) if rounded else value


def _rescale(value: Decimal, exponent: int, rounding: Rounding) -> tuple[int, bool]:
    """Coefficient of finite `value` re-expressed at `exponent`.

    Returns:
        (coefficient, inexact)
    """
    if exponent <= value.exponent:
        return shift_left(value.coefficient, value.exponent - exponent), False
    return round_digits(
        value.coefficient, exponent - value.exponent, rounding, value.sign
    )


def _aligned(a: Decimal, b: Decimal) -> tuple[int, int, int]:
    """Coefficients of finite a and b at their common (smaller) exponent."""
    exponent = min(a.exponent, b.exponent)
    return (
        shift_left(a.coefficient, a.exponent - exponent),
        shift_left(b.coefficient, b.exponent - exponent),
        exponent,
    )


# ============================================================================
# Addition and subtraction
# ============================================================================


def _normalize(a: Decimal, b: Decimal, precision: int) -> tuple[Decimal, Decimal]:
    """Replace a far smaller operand by a one-digit sticky value.

    When one operand lies entirely below the rounding position of the other,
    only its sign and non-zero-ness can influence the rounded sum, so it is
    replaced by 1 * 10**e just below that position.
    """
    if a.exponent < b.exponent:
        big, small, swapped = b, a, True
    else:
        big, small, swapped = a, b, False
    exponent = big.exponent + min(-1, big.digits - precision - 2)
    if small.adjusted_exponent < exponent:
        small = Decimal.finite(small.sign, 1, exponent)
    return (small, big) if swapped else (big, small)


def add(a: Decimal, b: Decimal, context: Context, *, rounded: bool = True) -> Decimal:
    """Sum of two values.

    Args:
        a: First operand
        b: Second operand
        context: Arithmetic context
        rounded: When False the exact sum is returned without rounding

    Returns:
        a + b
    """
    nan = _check_nans(context, a, b)
    if nan is not None:
        return nan

    if a.is_infinite:
        if b.is_infinite and a.sign != b.sign:
            return _invalid(context, "infinity_minus_infinity")
        return a
    if b.is_infinite:
        return b

    floor = context.rounding is Rounding.FLOOR
    exponent = min(a.exponent, b.exponent)

    if a.is_zero and b.is_zero:
        sign = (a.sign or b.sign) if floor else (a.sign and b.sign)
        return _finish(Decimal.zero(sign, exponent), context, rounded)

    if a.is_zero or b.is_zero:
        other = a if b.is_zero else b
        # Pad toward the ideal exponent, but no further than the precision
        exponent = max(exponent, other.exponent - context.precision - 1)
        padded = Decimal.finite(
            other.sign,
            shift_left(other.coefficient, other.exponent - exponent),
            exponent,
        )
        return _finish(padded, context, rounded)

    if rounded:
        a, b = _normalize(a, b, context.precision)

    ca, cb, exponent = _aligned(a, b)
    total = (-ca if a.sign else ca) + (-cb if b.sign else cb)
    if total == 0:
        return _finish(Decimal.zero(floor, exponent), context, rounded)
    return _finish(Decimal.finite(total < 0, abs(total), exponent), context, rounded)


def subtract(
    a: Decimal, b: Decimal, context: Context, *, rounded: bool = True
) -> Decimal:
    """Difference a - b."""
    nan = _check_nans(context, a, b)
    if nan is not None:
        return nan
    return add(a, copy_negate(b), context, rounded=rounded)


# ============================================================================
# Multiplication
# ============================================================================


def multiply(
    a: Decimal, b: Decimal, context: Context, *, rounded: bool = True
) -> Decimal:
    """Product of two values; with rounded=False the exact product."""
    nan = _check_nans(context, a, b)
    if nan is not None:
        return nan

    sign = a.sign != b.sign
    if a.is_infinite or b.is_infinite:
        if a.is_zero or b.is_zero:
            return _invalid(context, "zero_times_infinity")
        return Decimal.infinity(sign)

    product = Decimal.finite(
        sign, a.coefficient * b.coefficient, a.exponent + b.exponent
    )
    return _finish(product, context, rounded)


def fma(a: Decimal, b: Decimal, c: Decimal, context: Context) -> Decimal:
    """Fused multiply-add: a * b + c with a single rounding."""
    for operand in (a, b, c):
        if operand.is_signaling:
            return _check_nans(context, operand)
    product = multiply(a, b, context, rounded=False)
    return add(product, c, context)


# ============================================================================
# Division
# ============================================================================


def divide(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """Quotient a / b rounded to the context.

    Exact quotients are given the exponent closest to the ideal exponent
    ``a.exponent - b.exponent`` (so 2.400 / 2 is 1.200, and 1 / 4 is 0.25).
    """
    nan = _check_nans(context, a, b)
    if nan is not None:
        return nan

    sign = a.sign != b.sign
    if a.is_infinite:
        if b.is_infinite:
            return _invalid(context, "infinity_divided_by_infinity")
        return Decimal.infinity(sign)
    if b.is_infinite:
        context.set_flag(Signal.CLAMPED)
        return Decimal.zero(sign, context.e_tiny)
    if b.is_zero:
        if a.is_zero:
            return _invalid(context, "zero_divided_by_zero")
        logger.debug("division_by_zero")
        context.set_flag(Signal.DIVISION_BY_ZERO)
        return Decimal.infinity(sign)

    ideal = a.exponent - b.exponent
    if a.is_zero:
        return round_to_context(Decimal.zero(sign, ideal), context)

    # Scale so the integer quotient has at least precision + 1 digits
    scale = b.digits - a.digits + context.precision + 2
    exponent = ideal - scale
    if scale >= 0:
        coefficient, rest = divmod(a.coefficient * pow10(scale), b.coefficient)
    else:
        coefficient, rest = divmod(a.coefficient, b.coefficient * pow10(-scale))

    if rest:
        # Sticky digit: the quotient lies strictly between two candidates
        coefficient = coefficient * 10 + 1
        exponent -= 1
    else:
        while exponent < ideal and coefficient % 10 == 0:
            coefficient //= 10
            exponent += 1

    return round_to_context(Decimal.finite(sign, coefficient, exponent), context)


def _integer_divmod(
    a: Decimal, b: Decimal, context: Context
) -> tuple[Decimal, Decimal] | None:
    """Truncated quotient and remainder of finite a by finite non-zero b.

    Returns:
        (quotient, remainder), or None when the integer quotient would need
        more than `precision` digits
    """
    sign = a.sign != b.sign
    ideal = min(a.exponent, b.exponent)
    gap = a.adjusted_exponent - b.adjusted_exponent

    if a.is_zero or gap <= -2:
        rest, _ = _rescale(a, ideal, context.rounding)
        return Decimal.zero(sign, 0), Decimal.finite(a.sign, rest, ideal)

    if gap <= context.precision:
        ca, cb, _ = _aligned(a, b)
        quotient, rest = divmod(ca, cb)
        if quotient < pow10(context.precision):
            return (
                Decimal.finite(sign, quotient, 0),
                Decimal.finite(a.sign, rest, ideal),
            )
    return None


def divide_integer(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """Integer part of a / b, truncated toward zero, with exponent 0.

    Sets INVALID_OPERATION if the quotient needs more than `precision` digits.
    """
    nan = _check_nans(context, a, b)
    if nan is not None:
        return nan

    sign = a.sign != b.sign
    if a.is_infinite:
        if b.is_infinite:
            return _invalid(context, "infinity_divided_by_infinity")
        return Decimal.infinity(sign)
    if b.is_infinite:
        return Decimal.zero(sign, 0)
    if b.is_zero:
        if a.is_zero:
            return _invalid(context, "zero_divided_by_zero")
        logger.debug("division_by_zero")
        context.set_flag(Signal.DIVISION_BY_ZERO)
        return Decimal.infinity(sign)

    split = _integer_divmod(a, b, context)
    if split is None:
        return _invalid(context, "division_impossible")
    return round_to_context(split[0], context)


def remainder(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """a - b * divide_integer(a, b); the result takes the sign of a."""
    nan = _check_nans(context, a, b)
    if nan is not None:
        return nan

    if a.is_infinite:
        return _invalid(context, "remainder_of_infinity")
    if b.is_zero:
        return _invalid(context, "remainder_by_zero")
    if b.is_infinite:
        return round_to_context(a, context)

    split = _integer_divmod(a, b, context)
    if split is None:
        return _invalid(context, "division_impossible")
    return round_to_context(split[1], context)


def remainder_near(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """a - b * n where n is a / b rounded to the nearest integer (ties to even).

    The result may have the opposite sign to a, e.g. remainder_near(10, 6)
    is -2.
    """
    nan = _check_nans(context, a, b)
    if nan is not None:
        return nan

    if a.is_infinite:
        return _invalid(context, "remainder_of_infinity")
    if b.is_zero:
        return _invalid(context, "remainder_by_zero")
    if b.is_infinite:
        return round_to_context(a, context)

    ideal = min(a.exponent, b.exponent)
    if a.is_zero:
        return round_to_context(Decimal.zero(a.sign, ideal), context)

    gap = a.adjusted_exponent - b.adjusted_exponent
    if gap >= context.precision + 1:
        return _invalid(context, "division_impossible")
    if gap <= -2:
        rest, _ = _rescale(a, ideal, context.rounding)
        return round_to_context(Decimal.finite(a.sign, rest, ideal), context)

    ca, cb, _ = _aligned(a, b)
    quotient, rest = divmod(ca, cb)
    if 2 * rest + (quotient & 1) > cb:
        rest -= cb
        quotient += 1
    if quotient >= pow10(context.precision):
        return _invalid(context, "division_impossible")

    sign = a.sign
    if rest < 0:
        sign = not sign
        rest = -rest
    return round_to_context(Decimal.finite(sign, rest, ideal), context)


# ============================================================================
# Quantize
# ============================================================================


def quantize(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """Value of a expressed with the exponent of b.

    Digits are discarded using the context rounding mode. INVALID_OPERATION
    is set if the result needs more than `precision` digits, if the target
    exponent lies outside [e_tiny, e_max], or if exactly one operand is
    infinite.
    """
    nan = _check_nans(context, a, b)
    if nan is not None:
        return nan

    if a.is_infinite or b.is_infinite:
        if a.is_infinite and b.is_infinite:
            return a
        return _invalid(context, "quantize_infinity_mismatch")

    exponent = b.exponent
    if not context.e_tiny <= exponent <= context.e_max:
        return _invalid(context, "quantize_exponent_out_of_range")
    if a.is_zero:
        return Decimal.zero(a.sign, exponent)
    if a.adjusted_exponent > context.e_max:
        return _invalid(context, "quantize_operand_too_large")
    if a.adjusted_exponent - exponent + 1 > context.precision:
        return _invalid(context, "quantize_needs_more_digits")

    coefficient, inexact = _rescale(a, exponent, context.rounding)
    if num_digits(coefficient) > context.precision:
        return _invalid(context, "quantize_needs_more_digits")

    result = Decimal.finite(a.sign, coefficient, exponent)
    if coefficient != 0 and result.adjusted_exponent < context.e_min:
        context.set_flag(Signal.SUBNORMAL)
    if exponent > a.exponent:
        if inexact:
            context.set_flag(Signal.INEXACT)
        context.set_flag(Signal.ROUNDED)
    return result


# ============================================================================
# Unary arithmetic
# ============================================================================


def plus(a: Decimal, context: Context) -> Decimal:
    """0 + a: a rounded to the context (-0 becomes 0 unless rounding FLOOR)."""
    nan = _check_nans(context, a)
    if nan is not None:
        return nan
    if a.is_zero and context.rounding is not Rounding.FLOOR:
        a = copy_abs(a)
    return round_to_context(a, context)


def minus(a: Decimal, context: Context) -> Decimal:
    """0 - a, rounded to the context."""
    nan = _check_nans(context, a)
    if nan is not None:
        return nan
    if a.is_zero and context.rounding is not Rounding.FLOOR:
        result = copy_abs(a)
    else:
        result = copy_negate(a)
    return round_to_context(result, context)


def abs_value(a: Decimal, context: Context) -> Decimal:
    """|a|, rounded to the context."""
    nan = _check_nans(context, a)
    if nan is not None:
        return nan
    return round_to_context(copy_abs(a), context)


def reduce(a: Decimal, context: Context) -> Decimal:
    """Round a, then strip trailing zeros from its coefficient.

    Zero reduces to a zero with exponent 0 (keeping its sign).
    """
    nan = _check_nans(context, a)
    if nan is not None:
        return nan

    result = round_to_context(a, context)
    if result.is_infinite:
        return result
    if result.is_zero:
        return Decimal.zero(result.sign, 0)

    coefficient, exponent = result.coefficient, result.exponent
    while coefficient % 10 == 0 and exponent < context.e_max:
        coefficient //= 10
        exponent += 1
    return Decimal.finite(result.sign, coefficient, exponent)


def _integer_argument(n: Decimal | int, limit: int) -> int | None:
    """Integer value of an exponent-0 operand within [-limit, limit], else None."""
    if isinstance(n, Decimal):
        if not n.is_finite or n.exponent != 0:
            return None
        value = -n.coefficient if n.sign else n.coefficient
    else:
        value = n
    if not -limit <= value <= limit:
        return None
    return value


def scaleb(a: Decimal, b: Decimal | int, context: Context) -> Decimal:
    """a * 10**b for an integral b, rounded to the context."""
    operands = (a, b) if isinstance(b, Decimal) else (a,)
    nan = _check_nans(context, *operands)
    if nan is not None:
        return nan

    n = _integer_argument(b, 2 * (context.e_max + context.precision))
    if n is None:
        return _invalid(context, "scaleb_argument")
    if a.is_infinite:
        return a
    return round_to_context(
        Decimal.finite(a.sign, a.coefficient, a.exponent + n), context
    )


def logb(a: Decimal, context: Context) -> Decimal:
    """Adjusted exponent of a as a Decimal.

    logb(0) is -Infinity with DIVISION_BY_ZERO; logb(+/-Inf) is +Infinity.
    """
    nan = _check_nans(context, a)
    if nan is not None:
        return nan
    if a.is_infinite:
        return Decimal.infinity(False)
    if a.is_zero:
        logger.debug("division_by_zero", operation="logb")
        context.set_flag(Signal.DIVISION_BY_ZERO)
        return Decimal.infinity(True)
    return round_to_context(Decimal(a.adjusted_exponent), context)


def round_to_integral_exact(a: Decimal, context: Context) -> Decimal:
    """a rounded to an integer (exponent 0) using the context rounding mode.

    Sets INEXACT and ROUNDED when fractional digits are discarded.
    """
    nan = _check_nans(context, a)
    if nan is not None:
        return nan
    if a.is_infinite or a.exponent >= 0:
        return a
    if a.is_zero:
        return Decimal.zero(a.sign, 0)

    coefficient, inexact = _rescale(a, 0, context.rounding)
    context.set_flag(Signal.ROUNDED)
    if inexact:
        context.set_flag(Signal.INEXACT)
    return Decimal.finite(a.sign, coefficient, 0)


def round_to_integral_value(a: Decimal, context: Context) -> Decimal:
    """As `round_to_integral_exact`, without setting INEXACT or ROUNDED."""
    nan = _check_nans(context, a)
    if nan is not None:
        return nan
    return round_to_integral_exact(a, context.scratch())


# ============================================================================
# Adjacent values
# ============================================================================


def next_plus(a: Decimal, context: Context) -> Decimal:
    """Smallest representable value greater than a."""
    nan = _check_nans(context, a)
    if nan is not None:
        return nan
    if a.is_infinite:
        return a if not a.sign else max_finite(context, True)

    ceiling = context.scratch(Rounding.CEILING)
    result = round_to_context(a, ceiling)
    if numeric_order(result, a) != 0:
        return result
    return add(a, Decimal.finite(False, 1, context.e_tiny - 1), ceiling)


def next_minus(a: Decimal, context: Context) -> Decimal:
    """Largest representable value less than a."""
    nan = _check_nans(context, a)
    if nan is not None:
        return nan
    if a.is_infinite:
        return a if a.sign else max_finite(context, False)

    floor = context.scratch(Rounding.FLOOR)
    result = round_to_context(a, floor)
    if numeric_order(result, a) != 0:
        return result
    return add(a, Decimal.finite(True, 1, context.e_tiny - 1), floor)


def next_toward(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """Representable value next to a in the direction of b.

    Equal operands give a with the sign of b. Reaching infinity sets
    OVERFLOW; landing on a subnormal or zero sets UNDERFLOW and SUBNORMAL
    (plus CLAMPED for zero); both also set INEXACT and ROUNDED.
    """
    nan = _check_nans(context, a, b)
    if nan is not None:
        return nan

    order = numeric_order(a, b)
    if order == 0:
        return copy_sign(a, b)

    result = next_plus(a, context) if order < 0 else next_minus(a, context)
    if result.is_infinite:
        context.set_flag(Signal.OVERFLOW)
        context.set_flag(Signal.INEXACT)
        context.set_flag(Signal.ROUNDED)
    elif result.adjusted_exponent < context.e_min:
        context.set_flag(Signal.UNDERFLOW)
        context.set_flag(Signal.SUBNORMAL)
        context.set_flag(Signal.INEXACT)
        context.set_flag(Signal.ROUNDED)
        if result.is_zero:
            context.set_flag(Signal.CLAMPED)
    return result


# ============================================================================
# Sign and digit manipulation (never set flags unless noted)
# ============================================================================


def _with_sign(a: Decimal, sign: bool) -> Decimal:
    if a.sign == sign:
        return a
    if a.is_finite:
        return Decimal.finite(sign, a.coefficient, a.exponent)
    if a.is_infinite:
        return Decimal.infinity(sign)
    if a.is_signaling:
        return Decimal.snan(sign, a.payload)
    return Decimal.nan(sign, a.payload)


def copy(a: Decimal) -> Decimal:
    return a


def copy_abs(a: Decimal) -> Decimal:
    return _with_sign(a, False)


def copy_negate(a: Decimal) -> Decimal:
    return _with_sign(a, not a.sign)


def copy_sign(a: Decimal, b: Decimal) -> Decimal:
    """a with the sign of b."""
    return _with_sign(a, b.sign)


def _digit_operands(
    a: Decimal, n: Decimal | int, context: Context
) -> tuple[Decimal | None, int | None]:
    operands = (a, n) if isinstance(n, Decimal) else (a,)
    nan = _check_nans(context, *operands)
    if nan is not None:
        return nan, None
    places = _integer_argument(n, context.precision)
    if places is None:
        return _invalid(context, "digit_shift_argument"), None
    return None, places


def shift(a: Decimal, n: Decimal | int, context: Context) -> Decimal:
    """Shift the coefficient of a by n digits (left when positive).

    The coefficient is treated as exactly `precision` digits: digits shifted
    out are lost and zeros are shifted in. Sets INVALID_OPERATION unless n is
    an integer in [-precision, precision].
    """
    early, places = _digit_operands(a, n, context)
    if early is not None:
        return early
    if a.is_infinite:
        return a

    modulus = pow10(context.precision)
    coefficient = a.coefficient % modulus
    if places > 0:
        coefficient = shift_left(coefficient, places) % modulus
    elif places < 0:
        coefficient, _ = shift_right(coefficient, -places)
    return Decimal.finite(a.sign, coefficient, a.exponent)


def rotate(a: Decimal, n: Decimal | int, context: Context) -> Decimal:
    """Rotate the coefficient of a by n digits (left when positive).

    The coefficient is padded or truncated to exactly `precision` digits
    first; digits rotated out of one end re-enter at the other.
    """
    early, places = _digit_operands(a, n, context)
    if early is not None:
        return early
    if a.is_infinite:
        return a

    precision = context.precision
    digits = str(a.coefficient % pow10(precision)).zfill(precision)
    places %= precision
    rotated = digits[places:] + digits[:places]
    return Decimal.finite(a.sign, int(rotated), a.exponent)


# ============================================================================
# Classification
# ============================================================================


def classify(a: Decimal, context: Context) -> str:
    """Class name of a: sNaN, NaN, +/-Infinity, +/-Zero, +/-Normal or +/-Subnormal."""
    if a.is_signaling:
        return "sNaN"
    if a.is_quiet:
        return "NaN"
    sign = "-" if a.sign else "+"
    if a.is_infinite:
        return sign + "Infinity"
    if a.is_zero:
        return sign + "Zero"
    if a.is_normal(context):
        return sign + "Normal"
    return sign + "Subnormal"


def radix() -> Decimal:
    """The radix of decimal arithmetic, 10."""
    return Decimal(10)

"""Comparison and selection operations.

`compare`, `compare_signal` and `compare_total` return -1, 0 or 1. NaN
operands are ordered by the conventions below rather than reported as
"unordered", so every comparison yields a definite answer:

- compare: a signaling NaN sets INVALID_OPERATION; a NaN operand is
  considered greater than a non-NaN one (the first operand when both are NaN)
- compare_total: a total order over all representations, flag-free
"""

from __future__ import annotations

import structlog

from decarith.context import Context, Signal
from decarith.rounding import quiet_nan, round_to_context
from decarith.value import Decimal, Kind

logger = structlog.get_logger()

__all__ = [
    "numeric_order",
    "compare",
    "compare_signal",
    "compare_total",
    "compare_total_magnitude",
    "equals",
    "max_value",
    "min_value",
    "max_magnitude",
    "min_magnitude",
    "same_quantum",
]

_TOTAL_RANK = {Kind.FINITE: 0, Kind.INFINITE: 1, Kind.SNAN: 2, Kind.QNAN: 3}


def _cmp(x: int, y: int) -> int:
    return (x > y) - (x < y)


def _magnitude_order(a: Decimal, b: Decimal) -> int:
    """Order |a| against |b| for finite a and b."""
    if a.is_zero or b.is_zero:
        return _cmp(0 if a.is_zero else 1, 0 if b.is_zero else 1)
    if a.adjusted_exponent != b.adjusted_exponent:
        return _cmp(a.adjusted_exponent, b.adjusted_exponent)
    # Same adjusted exponent: align coefficients and compare exactly
    ca, cb = a.coefficient, b.coefficient
    if a.exponent > b.exponent:
        ca *= 10 ** (a.exponent - b.exponent)
    elif b.exponent > a.exponent:
        cb *= 10 ** (b.exponent - a.exponent)
    return _cmp(ca, cb)


def _signed_rank(value: Decimal) -> int:
    """-1 for negative values, 1 for positive, 0 for zeros."""
    if value.is_zero:
        return 0
    return -1 if value.sign else 1


def numeric_order(a: Decimal, b: Decimal) -> int:
    """Numeric order of two non-NaN values; zeros of either sign are equal."""
    if a.is_infinite or b.is_infinite:
        if a.is_infinite and b.is_infinite and a.sign == b.sign:
            return 0
        if a.is_infinite:
            return -1 if a.sign else 1
        return 1 if b.sign else -1

    rank_a, rank_b = _signed_rank(a), _signed_rank(b)
    if rank_a != rank_b:
        return _cmp(rank_a, rank_b)
    if rank_a == 0:
        return 0
    order = _magnitude_order(a, b)
    return -order if a.sign else order


# ============================================================================
# Numeric comparison
# ============================================================================


def compare(a: Decimal, b: Decimal, context: Context) -> int:
    """Compare two values numerically.

    Args:
        a: First operand
        b: Second operand
        context: Receives INVALID_OPERATION if either operand is a signaling NaN

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b (NaNs order as described above)
    """
    if a.is_signaling or b.is_signaling:
        logger.debug("compare_signaling_nan")
        context.set_flag(Signal.INVALID_OPERATION)
        return 1 if a.is_signaling else -1
    if a.is_nan:
        return 1
    if b.is_nan:
        return -1
    return numeric_order(a, b)


def compare_signal(a: Decimal, b: Decimal, context: Context) -> int:
    """As `compare`, but any NaN operand sets INVALID_OPERATION."""
    if a.is_nan or b.is_nan:
        context.set_flag(Signal.INVALID_OPERATION)
    return compare(a, b, context)


def equals(a: Decimal, b: Decimal, context: Context) -> bool:
    """Numeric equality; NaN is never equal to anything."""
    if a.is_signaling or b.is_signaling:
        context.set_flag(Signal.INVALID_OPERATION)
        return False
    if a.is_nan or b.is_nan:
        return False
    return numeric_order(a, b) == 0


# ============================================================================
# Total ordering
# ============================================================================


def compare_total(a: Decimal, b: Decimal) -> int:
    """Compare the representations of two values in the total order.

    Negative values precede positive ones. Among positive values the order is
    finite < Infinity < sNaN < NaN (reversed for negative values); NaNs of the
    same kind are ordered by payload, and numerically equal finite values by
    exponent. Never sets flags.
    """
    if a.sign != b.sign:
        return -1 if a.sign else 1

    rank_a, rank_b = _TOTAL_RANK[a.kind], _TOTAL_RANK[b.kind]
    if rank_a != rank_b:
        order = _cmp(rank_a, rank_b)
    elif a.is_nan:
        order = _cmp(a.payload, b.payload)
    elif a.is_infinite:
        order = 0
    else:
        order = _magnitude_order(a, b)
        if order == 0:
            order = _cmp(a.exponent, b.exponent)
    return -order if a.sign else order


def compare_total_magnitude(a: Decimal, b: Decimal) -> int:
    """`compare_total` applied to the absolute values."""
    return compare_total(_unsigned(a), _unsigned(b))


def _unsigned(value: Decimal) -> Decimal:
    if not value.sign:
        return value
    return Decimal._make(
        value.kind, False, value._coefficient, value.exponent, value.digits
    )


# ============================================================================
# Selection
# ============================================================================


def _select_nan(a: Decimal, b: Decimal, context: Context) -> Decimal | None:
    """Result of a selection when NaNs are involved, or None if there are none."""
    if a.is_signaling or b.is_signaling:
        context.set_flag(Signal.INVALID_OPERATION)
        return quiet_nan(a if a.is_signaling else b, context)
    if a.is_nan and b.is_nan:
        return quiet_nan(a, context)
    if a.is_nan:
        return round_to_context(b, context)
    if b.is_nan:
        return round_to_context(a, context)
    return None


def max_value(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """Larger of two values, rounded to the context.

    A quiet NaN loses to a number. Numerically equal operands are resolved by
    the total order, so +0 beats -0 and 1.0 (positive) beats 1.00.
    """
    nan = _select_nan(a, b, context)
    if nan is not None:
        return nan
    order = numeric_order(a, b)
    if order == 0:
        order = compare_total(a, b)
    return round_to_context(b if order < 0 else a, context)


def min_value(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """Smaller of two values, rounded to the context."""
    nan = _select_nan(a, b, context)
    if nan is not None:
        return nan
    order = numeric_order(a, b)
    if order == 0:
        order = compare_total(a, b)
    return round_to_context(a if order < 0 else b, context)


def max_magnitude(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """Operand with the larger absolute value (signed), rounded."""
    nan = _select_nan(a, b, context)
    if nan is not None:
        return nan
    order = numeric_order(_unsigned(a), _unsigned(b))
    if order == 0:
        return max_value(a, b, context)
    return round_to_context(b if order < 0 else a, context)


def min_magnitude(a: Decimal, b: Decimal, context: Context) -> Decimal:
    """Operand with the smaller absolute value (signed), rounded."""
    nan = _select_nan(a, b, context)
    if nan is not None:
        return nan
    order = numeric_order(_unsigned(a), _unsigned(b))
    if order == 0:
        return min_value(a, b, context)
    return round_to_context(a if order < 0 else b, context)


def same_quantum(a: Decimal, b: Decimal) -> bool:
    """True if a and b share an exponent, or are both NaN or both infinite."""
    if a.is_special or b.is_special:
        return (a.is_nan and b.is_nan) or (a.is_infinite and b.is_infinite)
    return a.exponent == b.exponent

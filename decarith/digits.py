"""Integer helpers for working with decimal coefficients."""

from __future__ import annotations

__all__ = ["num_digits", "pow10", "shift_left", "shift_right"]


def num_digits(n: int) -> int:
    """Number of decimal digits in a non-negative integer (0 has one digit)."""
    if n < 10:
        return 1
    return len(str(n))


def pow10(n: int) -> int:
    """10**n for n >= 0."""
    return 10**n


def shift_left(coefficient: int, places: int) -> int:
    """Append `places` zero digits to a coefficient."""
    if places <= 0:
        return coefficient
    return coefficient * 10**places


def shift_right(coefficient: int, places: int) -> tuple[int, int]:
    """Drop the `places` low digits of a coefficient.

    Returns:
        (kept, dropped) where dropped is the integer value of the removed digits.
    """
    if places <= 0:
        return coefficient, 0
    return divmod(coefficient, 10**places)

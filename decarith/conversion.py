"""Conversion between decimal values and strings.

Three output forms are supported:

- scientific: plain notation for exponents <= 0 with adjusted exponent >= -6,
  otherwise one digit before the point and an ``E`` exponent
- engineering: as scientific, but the exponent is a multiple of three
- abstract: ``[sign,coefficient,exponent]``, ``[sign,inf]``,
  ``[sign,qNaN(,payload)]`` or ``[sign,sNaN(,payload)]``

Parsing accepts the General Decimal Arithmetic literal grammar, ignoring case
for ``Inf``/``Infinity``/``NaN``/``sNaN``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

from decarith.context import Signal
from decarith.errors import ConversionSyntaxError
from decarith.rounding import round_to_context
from decarith.value import Decimal, Kind

if TYPE_CHECKING:
    from decarith.context import Context

logger = structlog.get_logger()

__all__ = [
    "parse_literal",
    "parse",
    "to_sci_string",
    "to_eng_string",
    "to_abstract",
]

_LITERAL = re.compile(
    r"""
    (?P<sign>[-+])?
    (?:
        (?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?(?:[eE](?P<exp>[-+]?[0-9]+))?
      | (?P<inf>inf(?:inity)?)
      | (?P<signal>s)?nan(?P<payload>[0-9]*)
    )
    """,
    re.VERBOSE | re.IGNORECASE,
)


# ============================================================================
# Parsing
# ============================================================================


def parse_literal(text: str) -> Decimal:
    """Parse a decimal literal exactly.

    Args:
        text: Literal such as ``"-1.23E+5"``, ``".5"``, ``"Inf"`` or ``"sNaN12"``

    Returns:
        The parsed value, without any rounding

    Raises:
        ConversionSyntaxError: If text does not match the literal grammar
    """
    match = _LITERAL.fullmatch(text)
    if match is None:
        raise ConversionSyntaxError(text)

    sign = match.group("sign") == "-"
    if match.group("inf") is not None:
        return Decimal.infinity(sign)
    if match.group("payload") is not None:
        payload = int(match.group("payload") or "0")
        if match.group("signal"):
            return Decimal.snan(sign, payload)
        return Decimal.nan(sign, payload)

    int_part = match.group("int") or ""
    frac_part = match.group("frac") or ""
    if not int_part and not frac_part:
        raise ConversionSyntaxError(text)
    exponent = int(match.group("exp") or "0") - len(frac_part)
    return Decimal.finite(sign, int(int_part + frac_part), exponent)


def parse(text: str, context: Context, *, rounded: bool = True) -> Decimal:
    """Parse a literal into `context`.

    Invalid text does not raise: INVALID_OPERATION is set and a quiet NaN is
    returned. Finite results are rounded to the context unless `rounded` is
    False, in which case the exact value is returned.
    """
    try:
        value = parse_literal(text)
    except ConversionSyntaxError:
        logger.debug("conversion_syntax_error", text=text)
        context.set_flag(Signal.INVALID_OPERATION)
        return Decimal.nan()
    if not rounded:
        return value
    return round_to_context(value, context)


# ============================================================================
# Formatting
# ============================================================================


def _special_string(value: Decimal) -> str:
    sign = "-" if value.sign else ""
    if value.kind is Kind.INFINITE:
        return sign + "Infinity"
    text = "sNaN" if value.is_signaling else "NaN"
    if value.payload:
        text += str(value.payload)
    return sign + text


def _format(value: Decimal, engineering: bool) -> str:
    if value.is_special:
        return _special_string(value)

    coefficient = str(value.coefficient)
    exponent = value.exponent
    left_digits = exponent + len(coefficient)

    # Position of the decimal point relative to the start of the coefficient
    if exponent <= 0 and left_digits > -6:
        dot_place = left_digits
    elif not engineering:
        dot_place = 1
    elif value.coefficient == 0:
        dot_place = (left_digits + 1) % 3 - 1
    else:
        dot_place = (left_digits - 1) % 3 + 1

    if dot_place <= 0:
        int_part = "0"
        frac_part = "." + "0" * (-dot_place) + coefficient
    elif dot_place >= len(coefficient):
        int_part = coefficient + "0" * (dot_place - len(coefficient))
        frac_part = ""
    else:
        int_part = coefficient[:dot_place]
        frac_part = "." + coefficient[dot_place:]

    if left_digits == dot_place:
        exp_part = ""
    else:
        exp_part = "E%+d" % (left_digits - dot_place)

    sign = "-" if value.sign else ""
    return sign + int_part + frac_part + exp_part


def to_sci_string(value: Decimal) -> str:
    """Scientific string form."""
    return _format(value, engineering=False)


def to_eng_string(value: Decimal) -> str:
    """Engineering string form (exponent a multiple of three)."""
    return _format(value, engineering=True)


def to_abstract(value: Decimal) -> str:
    """Abstract representation, e.g. ``[0,123,-2]`` or ``[1,sNaN,5]``."""
    sign = 1 if value.sign else 0
    if value.kind is Kind.FINITE:
        return f"[{sign},{value.coefficient},{value.exponent}]"
    if value.kind is Kind.INFINITE:
        return f"[{sign},inf]"
    tag = "sNaN" if value.is_signaling else "qNaN"
    if value.payload:
        return f"[{sign},{tag},{value.payload}]"
    return f"[{sign},{tag}]"

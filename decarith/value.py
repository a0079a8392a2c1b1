"""The immutable decimal value type.

A Decimal is one of four kinds:

- FINITE: sign, integer coefficient and integer exponent, with value
  (-1)**sign * coefficient * 10**exponent
- INFINITE: sign only
- QNAN / SNAN: quiet or signaling NaN with sign and integer payload

Values are never modified after construction; every operation in
decarith.arithmetic returns a new Decimal. Accessors are total: special values
report a coefficient and exponent of 0, and `payload` is None unless the
value is a NaN.
"""

from __future__ import annotations

import sys
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING

from decarith.digits import num_digits

if TYPE_CHECKING:
    from decarith.context import Context

__all__ = ["Kind", "Decimal"]


class Kind(str, Enum):
    """Kinds of decimal value."""

    FINITE = "finite"
    INFINITE = "infinite"
    QNAN = "qnan"
    SNAN = "snan"


class Decimal:
    """Arbitrary-precision decimal floating-point value.

    Construct from an int (with an optional exponent), a literal string, or
    another Decimal. Binary floats must go through `from_float`, which is
    lossy by nature.

    Examples:
        >>> Decimal(123, -2)
        Decimal('1.23')
        >>> Decimal("-1.5E+3").adjusted_exponent
        3

    Attributes:
        sign: True for negative values
        coefficient: Non-negative integer significand (0 for specials)
        exponent: Power of ten applied to the coefficient (0 for specials)
    """

    __slots__ = ("_kind", "_sign", "_coefficient", "_exponent", "_digits")
    _kind: Kind
    _sign: bool
    _coefficient: int
    _exponent: int
    _digits: int

    def __init__(self, value: int | str | Decimal = 0, exponent: int = 0) -> None:
        """Create a Decimal.

        Args:
            value: Integer coefficient, decimal literal, or Decimal to copy
            exponent: Exponent applied to an integer value

        Raises:
            TypeError: If value is not an int, str or Decimal
            ConversionSyntaxError: If a string is not a valid literal
        """
        if isinstance(value, Decimal):
            source = value
        elif isinstance(value, bool):
            raise TypeError("Decimal does not accept bool values")
        elif isinstance(value, int):
            source = Decimal.finite(value < 0, abs(value), exponent)
        elif isinstance(value, str):
            from decarith.conversion import parse_literal

            source = parse_literal(value)
        elif isinstance(value, float):
            raise TypeError("Use Decimal.from_float() to convert a float")
        else:
            raise TypeError(
                f"Cannot convert {type(value).__name__} to Decimal"
            )
        self._kind = source._kind
        self._sign = source._sign
        self._coefficient = source._coefficient
        self._exponent = source._exponent
        self._digits = source._digits

    @classmethod
    def _make(
        cls, kind: Kind, sign: bool, coefficient: int, exponent: int, digits: int
    ) -> Decimal:
        obj = object.__new__(cls)
        obj._kind = kind
        obj._sign = bool(sign)
        obj._coefficient = coefficient
        obj._exponent = exponent
        obj._digits = digits
        return obj

    # ========================================================================
    # Factories
    # ========================================================================

    @classmethod
    def finite(cls, sign: bool, coefficient: int, exponent: int) -> Decimal:
        """Finite value (-1)**sign * coefficient * 10**exponent."""
        if coefficient < 0:
            raise ValueError(f"Coefficient must be non-negative, got {coefficient}")
        return cls._make(
            Kind.FINITE, sign, coefficient, exponent, num_digits(coefficient)
        )

    @classmethod
    def zero(cls, sign: bool = False, exponent: int = 0) -> Decimal:
        return cls._make(Kind.FINITE, sign, 0, exponent, 1)

    @classmethod
    def infinity(cls, sign: bool = False) -> Decimal:
        return cls._make(Kind.INFINITE, sign, 0, 0, 0)

    @classmethod
    def nan(cls, sign: bool = False, payload: int = 0) -> Decimal:
        """Quiet NaN."""
        if payload < 0:
            raise ValueError(f"NaN payload must be non-negative, got {payload}")
        return cls._make(Kind.QNAN, sign, payload, 0, 0)

    @classmethod
    def snan(cls, sign: bool = False, payload: int = 0) -> Decimal:
        """Signaling NaN."""
        if payload < 0:
            raise ValueError(f"NaN payload must be non-negative, got {payload}")
        return cls._make(Kind.SNAN, sign, payload, 0, 0)

    @classmethod
    def from_float(cls, value: float, context: Context | None = None) -> Decimal:
        """Convert a binary float.

        The binary value is expanded exactly, then rounded to `context` when
        one is given (setting INEXACT/ROUNDED there as usual).

        Args:
            value: Float to convert (int is accepted too)
            context: Optional context to round the result into

        Returns:
            The converted Decimal
        """
        if isinstance(value, int) and not isinstance(value, bool):
            result = cls(value)
        elif isinstance(value, float):
            result = _exact_from_float(value)
        else:
            raise TypeError(f"Expected float, got {type(value).__name__}")
        if context is None:
            return result
        from decarith.rounding import round_to_context

        return round_to_context(result, context)

    # ========================================================================
    # Accessors
    # ========================================================================

    @property
    def kind(self) -> Kind:
        return self._kind

    @property
    def sign(self) -> bool:
        return self._sign

    @property
    def coefficient(self) -> int:
        return self._coefficient if self._kind is Kind.FINITE else 0

    @property
    def exponent(self) -> int:
        return self._exponent

    @property
    def digits(self) -> int:
        """Number of coefficient digits: 1 for zero, 0 for special values."""
        return self._digits

    @property
    def adjusted_exponent(self) -> int:
        """Exponent of the most significant digit (0 for special values)."""
        if self._kind is not Kind.FINITE:
            return 0
        return self._exponent + self._digits - 1

    @property
    def payload(self) -> int | None:
        """Diagnostic payload of a NaN, or None for any other value."""
        if self.is_nan:
            return self._coefficient
        return None

    # ========================================================================
    # Predicates
    # ========================================================================

    @property
    def is_finite(self) -> bool:
        return self._kind is Kind.FINITE

    @property
    def is_infinite(self) -> bool:
        return self._kind is Kind.INFINITE

    @property
    def is_nan(self) -> bool:
        return self._kind is Kind.QNAN or self._kind is Kind.SNAN

    @property
    def is_signaling(self) -> bool:
        return self._kind is Kind.SNAN

    @property
    def is_quiet(self) -> bool:
        return self._kind is Kind.QNAN

    @property
    def is_special(self) -> bool:
        return self._kind is not Kind.FINITE

    @property
    def is_zero(self) -> bool:
        return self._kind is Kind.FINITE and self._coefficient == 0

    @property
    def is_signed(self) -> bool:
        return self._sign

    @property
    def is_canonical(self) -> bool:
        """Always True: every value has a single in-memory representation."""
        return True

    @property
    def is_integral(self) -> bool:
        """True for finite values with no non-zero fractional digits."""
        if self._kind is not Kind.FINITE:
            return False
        if self._exponent >= 0 or self._coefficient == 0:
            return True
        if -self._exponent >= self._digits:
            return False
        return self._coefficient % 10 ** (-self._exponent) == 0

    def is_normal(self, context: Context) -> bool:
        """Finite, non-zero and adjusted exponent at least e_min."""
        return (
            self._kind is Kind.FINITE
            and self._coefficient != 0
            and self.adjusted_exponent >= context.e_min
        )

    def is_subnormal(self, context: Context) -> bool:
        """Finite, non-zero and adjusted exponent below e_min."""
        return (
            self._kind is Kind.FINITE
            and self._coefficient != 0
            and self.adjusted_exponent < context.e_min
        )

    def sgn(self) -> int:
        """-1, 0 or 1 by sign; NaNs report 0."""
        if self.is_nan or self.is_zero:
            return 0
        return -1 if self._sign else 1

    def quantum(self) -> Decimal:
        """1 * 10**exponent, the unit of the last place (NaN for specials)."""
        if self._kind is not Kind.FINITE:
            return Decimal.nan()
        return Decimal.finite(False, 1, self._exponent)

    # ========================================================================
    # Representation
    # ========================================================================

    def to_sci_string(self) -> str:
        from decarith.conversion import to_sci_string

        return to_sci_string(self)

    def to_eng_string(self) -> str:
        from decarith.conversion import to_eng_string

        return to_eng_string(self)

    def to_abstract(self) -> str:
        from decarith.conversion import to_abstract

        return to_abstract(self)

    def __str__(self) -> str:
        return self.to_sci_string()

    def __repr__(self) -> str:
        return f"Decimal('{self.to_sci_string()}')"

    # ========================================================================
    # Equality and hashing (numeric, flag-free)
    # ========================================================================

    def __eq__(self, other: object) -> bool:
        if isinstance(other, int) and not isinstance(other, bool):
            other = Decimal(other)
        if not isinstance(other, Decimal):
            return NotImplemented
        if self.is_nan or other.is_nan:
            return False
        from decarith.comparison import numeric_order

        return numeric_order(self, other) == 0

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        if self._kind is Kind.INFINITE:
            return hash(("inf", self._sign))
        if self.is_nan:
            return hash((self._kind, self._sign, self._coefficient))
        if self._coefficient == 0:
            return 0
        coefficient, exponent = self._coefficient, self._exponent
        while coefficient % 10 == 0:
            coefficient //= 10
            exponent += 1
        if exponent < 0:
            return hash((self._sign, coefficient, exponent))
        # Integral values hash like the equal int, without building it
        modulus = sys.hash_info.modulus
        result = coefficient * pow(10, exponent, modulus) % modulus
        if self._sign:
            result = -result
        return -2 if result == -1 else result


def _exact_from_float(value: float) -> Decimal:
    """Expand a binary float exactly as a decimal."""
    if value != value:
        return Decimal.nan()
    sign = value < 0 or (value == 0 and str(value).startswith("-"))
    if value in (float("inf"), float("-inf")):
        return Decimal.infinity(sign)
    ratio = Fraction(abs(value))
    numerator, denominator = ratio.numerator, ratio.denominator
    # denominator is a power of two: n / 2**k == n * 5**k / 10**k
    k = denominator.bit_length() - 1
    return Decimal.finite(sign, numerator * 5**k, -k)

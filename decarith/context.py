"""Arithmetic context: precision, rounding mode, exponent limits and flags.

A Context is a plain value owned by the caller. Every operation takes one
explicitly and records exceptional conditions by adding Signals to its flag
register; nothing is raised. Immutable ContextSettings describe reusable
configurations (such as the IEEE interchange formats) from which fresh
contexts are created, so presets can be shared freely.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum

from decarith.errors import InvalidContextError

__all__ = [
    "Rounding",
    "Signal",
    "ContextSettings",
    "Context",
    "DEFAULT_SETTINGS",
    "BASIC_SETTINGS",
    "DECIMAL32_SETTINGS",
    "DECIMAL64_SETTINGS",
    "DECIMAL128_SETTINGS",
    "default_context",
    "basic_context",
]


class Rounding(str, Enum):
    """Rounding modes."""

    HALF_EVEN = "half_even"
    HALF_UP = "half_up"
    HALF_DOWN = "half_down"
    UP = "up"
    DOWN = "down"
    CEILING = "ceiling"
    FLOOR = "floor"


class Signal(str, Enum):
    """Exceptional conditions recorded in a context's flag register."""

    INVALID_OPERATION = "invalid_operation"
    DIVISION_BY_ZERO = "division_by_zero"
    OVERFLOW = "overflow"
    UNDERFLOW = "underflow"
    INEXACT = "inexact"
    ROUNDED = "rounded"
    SUBNORMAL = "subnormal"
    CLAMPED = "clamped"


def _parse_rounding(value: Rounding | str) -> Rounding:
    if isinstance(value, Rounding):
        return value
    try:
        return Rounding(value.strip().lower())
    except ValueError:
        raise InvalidContextError(f"Unknown rounding mode: {value!r}") from None


def _validate(precision: int, e_max: int, e_min: int) -> None:
    if precision < 1:
        raise InvalidContextError(f"Precision must be positive, got {precision}")
    if e_max < 0:
        raise InvalidContextError(f"e_max must be non-negative, got {e_max}")
    if e_min > 0:
        raise InvalidContextError(f"e_min must not be positive, got {e_min}")


@dataclass(frozen=True)
class ContextSettings:
    """Immutable context configuration.

    Attributes:
        precision: Maximum number of significant digits (default: 9)
        rounding: Rounding mode applied when a result must be shortened
        e_max: Largest adjusted exponent of a finite result
        e_min: Smallest adjusted exponent of a normal result
    """

    precision: int = 9
    rounding: Rounding = Rounding.HALF_EVEN
    e_max: int = 99
    e_min: int = -99

    def __post_init__(self) -> None:
        object.__setattr__(self, "rounding", _parse_rounding(self.rounding))
        _validate(self.precision, self.e_max, self.e_min)

    def new_context(self) -> Context:
        """Create a fresh context with these settings and no flags set."""
        return Context(
            precision=self.precision,
            rounding=self.rounding,
            e_max=self.e_max,
            e_min=self.e_min,
        )

    @classmethod
    def from_env(
        cls, prefix: str = "DECARITH_", base: ContextSettings | None = None
    ) -> ContextSettings:
        """Read settings from environment variables.

        Recognised variables are ``<prefix>PRECISION``, ``<prefix>ROUNDING``,
        ``<prefix>EMAX`` and ``<prefix>EMIN``. Missing variables fall back to
        ``base`` (DEFAULT_SETTINGS when omitted).

        Raises:
            InvalidContextError: If a variable holds an unusable value
        """
        base = base or DEFAULT_SETTINGS

        def read_int(name: str, default: int) -> int:
            raw = os.environ.get(prefix + name)
            if raw is None:
                return default
            try:
                return int(raw)
            except ValueError:
                raise InvalidContextError(
                    f"{prefix}{name} must be an integer, got {raw!r}"
                ) from None

        return cls(
            precision=read_int("PRECISION", base.precision),
            rounding=os.environ.get(prefix + "ROUNDING", base.rounding),
            e_max=read_int("EMAX", base.e_max),
            e_min=read_int("EMIN", base.e_min),
        )


# Default configuration (9 digits, exponent range +/-99)
DEFAULT_SETTINGS = ContextSettings()

# General Decimal Arithmetic "basic" default context
BASIC_SETTINGS = ContextSettings(
    precision=9, rounding=Rounding.HALF_UP, e_max=999, e_min=-999
)

# IEEE 754-2008 interchange formats
DECIMAL32_SETTINGS = ContextSettings(precision=7, e_max=96, e_min=-95)
DECIMAL64_SETTINGS = ContextSettings(precision=16, e_max=384, e_min=-383)
DECIMAL128_SETTINGS = ContextSettings(precision=34, e_max=6144, e_min=-6143)


@dataclass
class Context:
    """Mutable arithmetic context.

    Attributes:
        precision: Maximum number of significant digits
        rounding: Rounding mode
        e_max: Largest adjusted exponent of a finite result
        e_min: Smallest adjusted exponent of a normal result
        flags: Signals raised since the register was last cleared
    """

    precision: int = 9
    rounding: Rounding = Rounding.HALF_EVEN
    e_max: int = 99
    e_min: int = -99
    flags: set[Signal] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.rounding = _parse_rounding(self.rounding)
        _validate(self.precision, self.e_max, self.e_min)

    @property
    def e_tiny(self) -> int:
        """Smallest exponent of a subnormal result."""
        return self.e_min - (self.precision - 1)

    @property
    def e_top(self) -> int:
        """Largest exponent of a full-precision finite result."""
        return self.e_max - (self.precision - 1)

    @property
    def settings(self) -> ContextSettings:
        return ContextSettings(
            precision=self.precision,
            rounding=self.rounding,
            e_max=self.e_max,
            e_min=self.e_min,
        )

    # --- Flag register ---

    def set_flag(self, signal: Signal) -> None:
        self.flags.add(signal)

    def has_flag(self, signal: Signal) -> bool:
        return signal in self.flags

    def clear_flags(self) -> None:
        self.flags.clear()

    # --- Derived contexts ---

    def copy(self) -> Context:
        """Independent copy, including a snapshot of the current flags."""
        return Context(
            precision=self.precision,
            rounding=self.rounding,
            e_max=self.e_max,
            e_min=self.e_min,
            flags=set(self.flags),
        )

    def with_precision(self, precision: int) -> Context:
        """Same limits at another precision, writing into this flag register."""
        return Context(
            precision=precision,
            rounding=self.rounding,
            e_max=self.e_max,
            e_min=self.e_min,
            flags=self.flags,
        )

    def with_rounding(self, rounding: Rounding) -> Context:
        """Same limits with another rounding mode, sharing this flag register."""
        return Context(
            precision=self.precision,
            rounding=rounding,
            e_max=self.e_max,
            e_min=self.e_min,
            flags=self.flags,
        )

    def scratch(self, rounding: Rounding | None = None) -> Context:
        """Same limits with a private, empty flag register."""
        return Context(
            precision=self.precision,
            rounding=rounding if rounding is not None else self.rounding,
            e_max=self.e_max,
            e_min=self.e_min,
        )


def default_context() -> Context:
    """Fresh context with DEFAULT_SETTINGS."""
    return DEFAULT_SETTINGS.new_context()


def basic_context() -> Context:
    """Fresh context with BASIC_SETTINGS."""
    return BASIC_SETTINGS.new_context()

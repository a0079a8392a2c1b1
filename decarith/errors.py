"""Exception hierarchy for decarith.

Arithmetic conditions (overflow, division by zero, invalid operations) are
never raised: they are recorded as flags on the Context. The exceptions here
cover misuse of the library itself, such as malformed literals passed to the
Decimal constructor or an inconsistent context configuration.
"""

from __future__ import annotations

__all__ = [
    "DecimalError",
    "ConversionSyntaxError",
    "InvalidContextError",
    "CodecError",
]


class DecimalError(Exception):
    """Base class for decarith errors."""

    pass


class ConversionSyntaxError(DecimalError, ValueError):
    """String does not match the decimal literal grammar."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Invalid decimal literal: {text!r}")


class InvalidContextError(DecimalError, ValueError):
    """Context settings are out of range or inconsistent."""

    pass


class CodecError(DecimalError, ValueError):
    """Bit pattern cannot be decoded by an interchange codec."""

    pass

"""Binary integer decimal (BID) interchange encoding.

Layout of a ``width``-bit value, most significant bit first::

    sign | combination field | trailing coefficient bits

When the coefficient fits in ``coefficient_bits`` bits the combination field
holds the biased exponent followed directly by the coefficient. Otherwise the
field starts with ``11``, followed by the exponent, and the coefficient is
stored without its implicit leading ``100`` bits. Special values use the top
combination bits: ``11110`` Infinity, ``111110`` quiet NaN, ``111111``
signaling NaN, with any NaN payload in the trailing bits.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from decarith.context import Context, ContextSettings, Signal
from decarith.digits import pow10, shift_left
from decarith.errors import CodecError
from decarith.rounding import round_to_context
from decarith.value import Decimal

logger = structlog.get_logger()

__all__ = ["BidFormat", "to_hex"]


@dataclass(frozen=True)
class BidFormat:
    """Parameters of one IEEE 754-2008 decimal interchange format.

    Attributes:
        name: Format name, e.g. "decimal64"
        width: Total number of bits
        exponent_bits: Width of the biased exponent
        precision: Coefficient digits
        e_max: Largest adjusted exponent
    """

    name: str
    width: int
    exponent_bits: int
    precision: int
    e_max: int

    @property
    def e_min(self) -> int:
        return 1 - self.e_max

    @property
    def bias(self) -> int:
        return self.e_max + self.precision - 2

    @property
    def exponent_min(self) -> int:
        """Smallest encodable exponent (the format's e_tiny)."""
        return self.e_min - (self.precision - 1)

    @property
    def exponent_max(self) -> int:
        """Largest encodable exponent."""
        return self.e_max - (self.precision - 1)

    @property
    def coefficient_bits(self) -> int:
        """Coefficient bits stored in the explicit (small coefficient) form."""
        return self.width - 1 - self.exponent_bits

    @property
    def payload_bits(self) -> int:
        return self.coefficient_bits - 3

    @property
    def max_coefficient(self) -> int:
        return pow10(self.precision) - 1

    @property
    def settings(self) -> ContextSettings:
        return ContextSettings(
            precision=self.precision, e_max=self.e_max, e_min=self.e_min
        )

    def context_for(self, context: Context) -> Context:
        """Format limits with the caller's rounding mode and flag register."""
        return Context(
            precision=self.precision,
            rounding=context.rounding,
            e_max=self.e_max,
            e_min=self.e_min,
            flags=context.flags,
        )

    # ========================================================================
    # Encoding
    # ========================================================================

    def encode(self, value: Decimal, context: Context) -> int:
        """Encode `value` as an unsigned integer of `width` bits.

        The value is first rounded into the format, writing any flags to
        `context`. Exponents above `exponent_max` are folded into the
        coefficient (CLAMPED); NaN payloads that do not fit are dropped.

        Args:
            value: Value to encode
            context: Supplies the rounding mode and receives flags

        Returns:
            The encoded bit pattern
        """
        sign_bit = (1 if value.sign else 0) << (self.width - 1)

        if value.is_nan:
            payload = value.payload or 0
            if payload > pow10(self.precision - 1) - 1:
                logger.debug("bid_payload_dropped", format=self.name, payload=payload)
                payload = 0
            top = 0b111111 if value.is_signaling else 0b111110
            return sign_bit | (top << (self.width - 7)) | payload

        if value.is_infinite:
            return sign_bit | (0b11110 << (self.width - 6))

        local = self.context_for(context)
        rounded = round_to_context(value, local)
        if rounded.is_infinite:
            return sign_bit | (0b11110 << (self.width - 6))

        coefficient, exponent = rounded.coefficient, rounded.exponent
        if exponent > self.exponent_max:
            if coefficient:
                coefficient = shift_left(coefficient, exponent - self.exponent_max)
            exponent = self.exponent_max
            logger.debug("bid_exponent_clamped", format=self.name)
            local.set_flag(Signal.CLAMPED)

        return sign_bit | self._pack(coefficient, exponent + self.bias)

    def _pack(self, coefficient: int, biased: int) -> int:
        cbits = self.coefficient_bits
        if coefficient < (1 << cbits):
            return (biased << cbits) | coefficient
        low_bits = cbits - 2
        return (
            (0b11 << (self.width - 3))
            | (biased << low_bits)
            | (coefficient & ((1 << low_bits) - 1))
        )

    # ========================================================================
    # Decoding
    # ========================================================================

    def decode(self, bits: int) -> Decimal:
        """Decode a `width`-bit pattern.

        Non-canonical coefficients (above 10**precision - 1) and NaN payloads
        decode as zero.

        Raises:
            CodecError: If bits is negative or wider than the format
        """
        if not 0 <= bits < (1 << self.width):
            raise CodecError(f"{self.name} bit pattern out of range: {bits:#x}")

        sign = bool(bits >> (self.width - 1))
        combination = (bits >> (self.width - 6)) & 0b11111

        if combination == 0b11111:
            payload = bits & ((1 << self.payload_bits) - 1)
            if payload > pow10(self.precision - 1) - 1:
                payload = 0
            if (bits >> (self.width - 7)) & 1:
                return Decimal.snan(sign, payload)
            return Decimal.nan(sign, payload)
        if combination == 0b11110:
            return Decimal.infinity(sign)

        exponent_mask = (1 << self.exponent_bits) - 1
        cbits = self.coefficient_bits
        if (bits >> (self.width - 3)) & 0b11 == 0b11:
            low_bits = cbits - 2
            biased = (bits >> low_bits) & exponent_mask
            coefficient = (0b100 << low_bits) | (bits & ((1 << low_bits) - 1))
        else:
            biased = (bits >> cbits) & exponent_mask
            coefficient = bits & ((1 << cbits) - 1)

        if coefficient > self.max_coefficient:
            logger.debug("bid_non_canonical", format=self.name)
            coefficient = 0
        return Decimal.finite(sign, coefficient, biased - self.bias)


def to_hex(bits: int, width: int) -> str:
    """Zero-padded hexadecimal form of an encoded value, e.g. 0x32800000."""
    return f"0x{bits:0{width // 4}X}"

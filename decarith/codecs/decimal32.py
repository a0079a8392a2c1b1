"""IEEE 754-2008 decimal32 interchange format (7 digits, BID encoding)."""

from __future__ import annotations

from decarith.codecs.bid import BidFormat, to_hex
from decarith.context import Context
from decarith.value import Decimal

__all__ = ["FORMAT", "encode", "decode", "hex_string"]

FORMAT = BidFormat(
    name="decimal32", width=32, exponent_bits=8, precision=7, e_max=96
)


def encode(value: Decimal, context: Context) -> int:
    return FORMAT.encode(value, context)


def decode(bits: int) -> Decimal:
    return FORMAT.decode(bits)


def hex_string(value: Decimal, context: Context) -> str:
    return to_hex(FORMAT.encode(value, context), FORMAT.width)

"""IEEE 754-2008 decimal64 interchange format (16 digits, BID encoding)."""

from __future__ import annotations

from decarith.codecs.bid import BidFormat, to_hex
from decarith.context import Context
from decarith.value import Decimal

__all__ = ["FORMAT", "encode", "decode", "hex_string"]

FORMAT = BidFormat(
    name="decimal64", width=64, exponent_bits=10, precision=16, e_max=384
)


def encode(value: Decimal, context: Context) -> int:
    return FORMAT.encode(value, context)


def decode(bits: int) -> Decimal:
    return FORMAT.decode(bits)


def hex_string(value: Decimal, context: Context) -> str:
    return to_hex(FORMAT.encode(value, context), FORMAT.width)

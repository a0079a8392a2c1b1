"""IEEE 754-2008 decimal128 interchange format (34 digits, BID encoding)."""

from __future__ import annotations

from decarith.codecs.bid import BidFormat, to_hex
from decarith.context import Context
from decarith.value import Decimal

__all__ = ["FORMAT", "encode", "decode", "hex_string"]

FORMAT = BidFormat(
    name="decimal128", width=128, exponent_bits=14, precision=34, e_max=6144
)


def encode(value: Decimal, context: Context) -> int:
    return FORMAT.encode(value, context)


def decode(bits: int) -> Decimal:
    return FORMAT.decode(bits)


def hex_string(value: Decimal, context: Context) -> str:
    return to_hex(FORMAT.encode(value, context), FORMAT.width)

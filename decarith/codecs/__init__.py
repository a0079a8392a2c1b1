"""Fixed-width IEEE 754-2008 decimal interchange codecs (BID encoding).

Each format module exposes ``encode(value, context) -> int`` and
``decode(bits) -> Decimal``:

    from decarith.codecs import decimal64

    bits = decimal64.encode(Decimal("1.5"), ctx)
    value = decimal64.decode(bits)
"""

from decarith.codecs import decimal32, decimal64, decimal128
from decarith.codecs.bid import BidFormat, to_hex

__all__ = ["BidFormat", "to_hex", "decimal32", "decimal64", "decimal128"]

"""decarith - General Decimal Arithmetic in Python.

Usage:
    from decarith import Decimal, default_context, add, divide

    ctx = default_context()
    result = divide(Decimal(1), Decimal(3), ctx)   # 0.333333333
    if Signal.INEXACT in ctx.flags:
        ...
"""

from decarith.arithmetic import (
    abs_value,
    add,
    classify,
    copy,
    copy_abs,
    copy_negate,
    copy_sign,
    divide,
    divide_integer,
    fma,
    logb,
    minus,
    multiply,
    next_minus,
    next_plus,
    next_toward,
    plus,
    quantize,
    radix,
    reduce,
    remainder,
    remainder_near,
    rotate,
    round_to_integral_exact,
    round_to_integral_value,
    scaleb,
    shift,
    subtract,
)
from decarith.comparison import (
    compare,
    compare_signal,
    compare_total,
    compare_total_magnitude,
    equals,
    max_magnitude,
    max_value,
    min_magnitude,
    min_value,
    same_quantum,
)
from decarith.context import (
    BASIC_SETTINGS,
    DECIMAL32_SETTINGS,
    DECIMAL64_SETTINGS,
    DECIMAL128_SETTINGS,
    DEFAULT_SETTINGS,
    Context,
    ContextSettings,
    Rounding,
    Signal,
    basic_context,
    default_context,
)
from decarith.conversion import parse, to_abstract, to_eng_string, to_sci_string
from decarith.errors import (
    CodecError,
    ConversionSyntaxError,
    DecimalError,
    InvalidContextError,
)
from decarith.rounding import (
    max_finite,
    min_normal,
    min_subnormal,
    round_to_context,
)
from decarith.transcendental import exp, ln, log10
from decarith.value import Decimal, Kind

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Value
    "Decimal",
    "Kind",
    # Context
    "Context",
    "ContextSettings",
    "Rounding",
    "Signal",
    "DEFAULT_SETTINGS",
    "BASIC_SETTINGS",
    "DECIMAL32_SETTINGS",
    "DECIMAL64_SETTINGS",
    "DECIMAL128_SETTINGS",
    "default_context",
    "basic_context",
    "round_to_context",
    "max_finite",
    "min_normal",
    "min_subnormal",
    # Conversion
    "parse",
    "to_sci_string",
    "to_eng_string",
    "to_abstract",
    # Arithmetic
    "add",
    "subtract",
    "multiply",
    "fma",
    "divide",
    "divide_integer",
    "remainder",
    "remainder_near",
    "quantize",
    "plus",
    "minus",
    "abs_value",
    "reduce",
    "scaleb",
    "logb",
    "round_to_integral_exact",
    "round_to_integral_value",
    "next_plus",
    "next_minus",
    "next_toward",
    "copy",
    "copy_abs",
    "copy_negate",
    "copy_sign",
    "shift",
    "rotate",
    "classify",
    "radix",
    # Comparison
    "compare",
    "compare_signal",
    "compare_total",
    "compare_total_magnitude",
    "equals",
    "max_value",
    "min_value",
    "max_magnitude",
    "min_magnitude",
    "same_quantum",
    # Transcendental
    "exp",
    "ln",
    "log10",
    # Errors
    "DecimalError",
    "ConversionSyntaxError",
    "InvalidContextError",
    "CodecError",
]

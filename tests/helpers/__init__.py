"""Test helpers module for shared test utilities.

- constants: Sample values, rounding modes and flag sets
- factories: Context and value factory functions
"""

from tests.helpers.constants import (
    ALL_ROUNDINGS,
    NO_FLAGS,
    ROUNDED_INEXACT,
    SAMPLE_FINITE,
    SAMPLE_SPECIAL,
)
from tests.helpers.factories import D, flags_of, make_context

__all__ = [
    # Constants
    "ALL_ROUNDINGS",
    "NO_FLAGS",
    "ROUNDED_INEXACT",
    "SAMPLE_FINITE",
    "SAMPLE_SPECIAL",
    # Factories
    "D",
    "make_context",
    "flags_of",
]

"""Pytest configuration and fixtures."""

import pytest

from decarith.context import (
    DECIMAL64_SETTINGS,
    Context,
    Rounding,
    default_context,
)
from tests.helpers.factories import make_context


@pytest.fixture
def ctx() -> Context:
    """Fresh default context: 9 digits, HALF_EVEN, exponents +/-99."""
    return default_context()


@pytest.fixture
def ctx3() -> Context:
    """Three-digit HALF_EVEN context with the default exponent range."""
    return make_context(precision=3)


@pytest.fixture
def tiny_ctx() -> Context:
    """Three-digit context with e_max 2, for overflow tests."""
    return make_context(precision=3, e_max=2, e_min=-2)


@pytest.fixture
def floor_ctx() -> Context:
    """Default context rounding toward -Infinity."""
    return make_context(rounding=Rounding.FLOOR)


@pytest.fixture
def ctx64() -> Context:
    """Fresh decimal64 context."""
    return DECIMAL64_SETTINGS.new_context()

"""Tests for the request and response models."""

import pytest
from pydantic import ValidationError

from decarith.api.models import (
    MAX_LITERAL_LENGTH,
    ContextModel,
    EvaluateRequest,
    EvaluateResponse,
    Notation,
)
from decarith.context import DEFAULT_SETTINGS, Rounding, Signal


class TestEvaluateRequest:
    """Tests for EvaluateRequest validation."""

    def test_minimal(self):
        """Operation alone is enough."""
        request = EvaluateRequest(operation="radix")
        assert request.operands == []
        assert request.context is None
        assert request.notation is Notation.SCIENTIFIC

    def test_integer_operands(self):
        """Integer operands are converted to literals."""
        request = EvaluateRequest(operation="add", operands=[12, "7.00"])
        assert request.operands == ["12", "7.00"]

    def test_invalid_literal_passes(self):
        """Syntax is checked at evaluation time, not here."""
        request = EvaluateRequest(operation="plus", operands=["1..2"])
        assert request.operands == ["1..2"]

    @pytest.mark.parametrize("operand", [True, 1.5, None, ["1"]])
    def test_rejects_other_types(self, operand):
        """Only strings and integers are operands."""
        with pytest.raises(ValidationError):
            EvaluateRequest(operation="plus", operands=[operand])

    def test_rejects_long_literal(self):
        """Operands over the length limit are rejected."""
        with pytest.raises(ValidationError, match="longer than"):
            EvaluateRequest(
                operation="plus", operands=["1" * (MAX_LITERAL_LENGTH + 1)]
            )

    def test_rejects_too_many_operands(self):
        """At most three operands."""
        with pytest.raises(ValidationError):
            EvaluateRequest(operation="fma", operands=["1", "2", "3", "4"])

    def test_rejects_empty_operation(self):
        """Operation names must be non-empty."""
        with pytest.raises(ValidationError):
            EvaluateRequest(operation="")


class TestContextModel:
    """Tests for context overrides."""

    def test_partial_override(self):
        """Omitted fields come from the base settings."""
        settings = ContextModel(precision=3).to_settings(DEFAULT_SETTINGS)
        assert settings.precision == 3
        assert settings.rounding is DEFAULT_SETTINGS.rounding
        assert settings.e_max == DEFAULT_SETTINGS.e_max

    def test_rounding_by_value(self):
        """Rounding modes are given by their string value."""
        model = ContextModel.model_validate({"rounding": "half_up"})
        assert model.rounding is Rounding.HALF_UP

    @pytest.mark.parametrize(
        "fields",
        [
            {"precision": 0},
            {"precision": 100000},
            {"e_max": -1},
            {"e_min": 1},
            {"rounding": "sideways"},
        ],
    )
    def test_rejects_out_of_range(self, fields):
        """Invalid limits fail validation."""
        with pytest.raises(ValidationError):
            ContextModel.model_validate(fields)


class TestEvaluateResponse:
    """Tests for response serialisation."""

    def test_flags_serialise_as_values(self):
        """Signals appear as their string values."""
        response = EvaluateResponse(
            operation="divide",
            result="0.333333333",
            abstract="[0,333333333,-9]",
            flags=[Signal.INEXACT, Signal.ROUNDED],
        )
        assert response.model_dump(mode="json")["flags"] == ["inexact", "rounded"]

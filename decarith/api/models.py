"""Request and response models for the evaluation service."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from decarith.context import ContextSettings, Rounding, Signal

# Longest operand literal accepted (characters)
MAX_LITERAL_LENGTH = 1000

# Most operands any operation takes (fma)
MAX_OPERANDS = 3

# Largest precision a request may ask for
MAX_PRECISION = 1000


def validate_literal(value: Any) -> str:
    """Normalise an operand to a literal string.

    Only the type and length are checked here. Text that is not a valid
    decimal literal is passed through and evaluates to NaN with
    INVALID_OPERATION set, as the arithmetic rules require.

    Raises:
        ValueError: If value is not a string or integer, or is too long
    """
    if isinstance(value, bool):
        raise ValueError("Operand must be a string or integer, got bool")
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError(
            f"Operand must be a string or integer, got {type(value).__name__}"
        )
    if len(value) > MAX_LITERAL_LENGTH:
        raise ValueError(f"Operand longer than {MAX_LITERAL_LENGTH} characters")
    return value


# Decimal operand as a literal string such as "1.23E+5" or "-Infinity"
DecimalLiteral = Annotated[
    str,
    BeforeValidator(validate_literal),
    Field(description="Decimal literal, e.g. '1.23E+5', '-0.00', 'NaN'"),
]


class Notation(str, Enum):
    """Output notation for decimal results."""

    SCIENTIFIC = "scientific"
    ENGINEERING = "engineering"


class ContextModel(BaseModel):
    """Context overrides; omitted fields come from the server defaults."""

    precision: int | None = Field(default=None, ge=1, le=MAX_PRECISION)
    rounding: Rounding | None = None
    e_max: int | None = Field(default=None, ge=0)
    e_min: int | None = Field(default=None, le=0)

    @classmethod
    def from_settings(cls, settings: ContextSettings) -> ContextModel:
        # Server settings may exceed the per-request limits; report them as-is
        return cls.model_construct(
            precision=settings.precision,
            rounding=settings.rounding,
            e_max=settings.e_max,
            e_min=settings.e_min,
        )

    def to_settings(self, base: ContextSettings) -> ContextSettings:
        return ContextSettings(
            precision=self.precision if self.precision is not None else base.precision,
            rounding=self.rounding if self.rounding is not None else base.rounding,
            e_max=self.e_max if self.e_max is not None else base.e_max,
            e_min=self.e_min if self.e_min is not None else base.e_min,
        )


class EvaluateRequest(BaseModel):
    """A single operation to evaluate."""

    operation: str = Field(min_length=1, max_length=64)
    operands: list[DecimalLiteral] = Field(
        default_factory=list, max_length=MAX_OPERANDS
    )
    context: ContextModel | None = None
    notation: Notation = Notation.SCIENTIFIC


class EvaluateResponse(BaseModel):
    """Result of an evaluation.

    Attributes:
        operation: Operation that was evaluated
        result: Result as a string (decimal, integer comparison result,
            "true"/"false", or a class name)
        abstract: Abstract representation when the result is a decimal
        flags: Signals raised during evaluation, sorted by name
    """

    operation: str
    result: str
    abstract: str | None = None
    flags: list[Signal] = Field(default_factory=list)


class OperationInfo(BaseModel):
    name: str
    arity: int


class HealthResponse(BaseModel):
    """Service status and the context applied to requests without overrides."""

    status: str = "ok"
    version: str
    context: ContextModel

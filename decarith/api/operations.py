"""Registry of operations exposed by the evaluation service.

Each entry adapts one library function to a uniform calling convention,
``func(operands, context)``, so the endpoint can dispatch by name.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from decarith import arithmetic, comparison, transcendental
from decarith.context import Context
from decarith.errors import DecimalError
from decarith.value import Decimal

__all__ = [
    "Operation",
    "OperationError",
    "UnknownOperationError",
    "ArityError",
    "OPERATIONS",
    "get_operation",
    "format_result",
]

Result = Decimal | int | bool | str


class OperationError(DecimalError):
    """Base class for operation dispatch errors."""

    pass


class UnknownOperationError(OperationError):
    """No operation is registered under the requested name."""

    pass


class ArityError(OperationError):
    """Wrong number of operands for an operation."""

    pass


@dataclass(frozen=True)
class Operation:
    """A named operation.

    Attributes:
        name: Registry key
        arity: Number of decimal operands
        func: Callable taking (operands, context)
    """

    name: str
    arity: int
    func: Callable[[Sequence[Decimal], Context], Result]

    def __call__(self, operands: Sequence[Decimal], context: Context) -> Result:
        if len(operands) != self.arity:
            raise ArityError(
                f"{self.name} takes {self.arity} operand(s), got {len(operands)}"
            )
        return self.func(operands, context)


def _unary(fn: Callable[[Decimal, Context], Result]) -> Callable:
    return lambda ops, ctx: fn(ops[0], ctx)


def _binary(fn: Callable[[Decimal, Decimal, Context], Result]) -> Callable:
    return lambda ops, ctx: fn(ops[0], ops[1], ctx)


def _build_registry() -> dict[str, Operation]:
    entries: list[tuple[str, int, Callable]] = [
        # Binary arithmetic
        ("add", 2, _binary(arithmetic.add)),
        ("subtract", 2, _binary(arithmetic.subtract)),
        ("multiply", 2, _binary(arithmetic.multiply)),
        ("divide", 2, _binary(arithmetic.divide)),
        ("divide_integer", 2, _binary(arithmetic.divide_integer)),
        ("remainder", 2, _binary(arithmetic.remainder)),
        ("remainder_near", 2, _binary(arithmetic.remainder_near)),
        ("quantize", 2, _binary(arithmetic.quantize)),
        ("scaleb", 2, _binary(arithmetic.scaleb)),
        ("shift", 2, _binary(arithmetic.shift)),
        ("rotate", 2, _binary(arithmetic.rotate)),
        ("next_toward", 2, _binary(arithmetic.next_toward)),
        ("fma", 3, lambda ops, ctx: arithmetic.fma(ops[0], ops[1], ops[2], ctx)),
        # Unary arithmetic
        ("plus", 1, _unary(arithmetic.plus)),
        ("minus", 1, _unary(arithmetic.minus)),
        ("abs", 1, _unary(arithmetic.abs_value)),
        ("reduce", 1, _unary(arithmetic.reduce)),
        ("logb", 1, _unary(arithmetic.logb)),
        ("round_to_integral_exact", 1, _unary(arithmetic.round_to_integral_exact)),
        ("round_to_integral_value", 1, _unary(arithmetic.round_to_integral_value)),
        ("next_plus", 1, _unary(arithmetic.next_plus)),
        ("next_minus", 1, _unary(arithmetic.next_minus)),
        ("classify", 1, _unary(arithmetic.classify)),
        ("radix", 0, lambda ops, ctx: arithmetic.radix()),
        ("exp", 1, _unary(transcendental.exp)),
        ("ln", 1, _unary(transcendental.ln)),
        ("log10", 1, _unary(transcendental.log10)),
        # Sign manipulation (flag-free)
        ("copy", 1, lambda ops, ctx: arithmetic.copy(ops[0])),
        ("copy_abs", 1, lambda ops, ctx: arithmetic.copy_abs(ops[0])),
        ("copy_negate", 1, lambda ops, ctx: arithmetic.copy_negate(ops[0])),
        ("copy_sign", 2, lambda ops, ctx: arithmetic.copy_sign(ops[0], ops[1])),
        # Comparison and selection
        ("compare", 2, _binary(comparison.compare)),
        ("compare_signal", 2, _binary(comparison.compare_signal)),
        ("compare_total", 2, lambda ops, ctx: comparison.compare_total(*ops)),
        (
            "compare_total_magnitude",
            2,
            lambda ops, ctx: comparison.compare_total_magnitude(*ops),
        ),
        ("equals", 2, _binary(comparison.equals)),
        ("max", 2, _binary(comparison.max_value)),
        ("min", 2, _binary(comparison.min_value)),
        ("max_magnitude", 2, _binary(comparison.max_magnitude)),
        ("min_magnitude", 2, _binary(comparison.min_magnitude)),
        ("same_quantum", 2, lambda ops, ctx: comparison.same_quantum(*ops)),
    ]
    return {name: Operation(name, arity, func) for name, arity, func in entries}


OPERATIONS: dict[str, Operation] = _build_registry()


def get_operation(name: str) -> Operation:
    """Look up an operation by name.

    Raises:
        UnknownOperationError: If no operation has that name
    """
    try:
        return OPERATIONS[name]
    except KeyError:
        raise UnknownOperationError(f"Unknown operation: {name!r}") from None


def format_result(result: Result, engineering: bool = False) -> tuple[str, str | None]:
    """String form of an operation result and, for decimals, its abstract form."""
    if isinstance(result, Decimal):
        text = result.to_eng_string() if engineering else result.to_sci_string()
        return text, result.to_abstract()
    if isinstance(result, bool):
        return ("true" if result else "false"), None
    return str(result), None

"""API endpoints for the decimal evaluation service."""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from decarith import __version__
from decarith.api.models import (
    ContextModel,
    EvaluateRequest,
    EvaluateResponse,
    HealthResponse,
    Notation,
    OperationInfo,
)
from decarith.api.operations import (
    OPERATIONS,
    OperationError,
    format_result,
    get_operation,
)
from decarith.context import ContextSettings
from decarith.conversion import parse
from decarith.errors import InvalidContextError

logger = structlog.get_logger()

router = APIRouter()


def get_settings() -> ContextSettings:
    """Dependency provider for the default context settings.

    Reads DECARITH_PRECISION, DECARITH_ROUNDING, DECARITH_EMAX and
    DECARITH_EMIN. Override this in tests:
        app.dependency_overrides[get_settings] = lambda: DECIMAL64_SETTINGS

    Returns:
        Settings used when a request does not specify its own context.
    """
    return ContextSettings.from_env()


@router.get("/health")
async def health(
    settings: ContextSettings = Depends(get_settings),
) -> HealthResponse:
    """Health check reporting the default context in effect."""
    return HealthResponse(
        version=__version__, context=ContextModel.from_settings(settings)
    )


@router.get("/operations")
async def list_operations() -> list[OperationInfo]:
    """List the available operations and their operand counts."""
    return [OperationInfo(name=op.name, arity=op.arity) for op in OPERATIONS.values()]


@router.post("/evaluate")
async def evaluate(
    request: EvaluateRequest,
    settings: ContextSettings = Depends(get_settings),
) -> EvaluateResponse:
    """Evaluate one operation in a fresh context.

    Args:
        request: Operation name, operand literals and optional context overrides
        settings: Injected default settings (via FastAPI Depends)

    Returns:
        EvaluateResponse with the result and every flag raised.

    Error Handling:
        - Invalid request schema: 422 Validation Error (Pydantic)
        - Unknown operation, wrong operand count, inconsistent context: 400
        - Invalid operand literals: NaN result with invalid_operation flag
    """
    try:
        operation = get_operation(request.operation)
        if request.context is not None:
            settings = request.context.to_settings(settings)
    except (OperationError, InvalidContextError) as err:
        logger.warning("evaluate_rejected", operation=request.operation, error=str(err))
        raise HTTPException(status_code=400, detail=str(err)) from err

    context = settings.new_context()
    operands = [parse(text, context, rounded=False) for text in request.operands]

    try:
        result = operation(operands, context)
    except OperationError as err:
        logger.warning("evaluate_rejected", operation=request.operation, error=str(err))
        raise HTTPException(status_code=400, detail=str(err)) from err

    text, abstract = format_result(
        result, engineering=request.notation is Notation.ENGINEERING
    )
    flags = sorted(context.flags, key=lambda signal: signal.value)
    logger.info(
        "evaluated",
        operation=operation.name,
        precision=context.precision,
        rounding=context.rounding.value,
        flags=[signal.value for signal in flags],
    )
    return EvaluateResponse(
        operation=operation.name, result=text, abstract=abstract, flags=flags
    )

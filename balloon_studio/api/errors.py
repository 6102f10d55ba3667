"""Mapping of service errors onto HTTP responses."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from balloon_studio.errors import (
    AccessDeniedError,
    AuthenticationRequiredError,
    BalloonStudioError,
    ConcurrentUpdateError,
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
    StockRecordExistsError,
    ValidationError,
)
from balloon_studio.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_STATUS_CODES: dict[type, int] = {
    ValidationError: 400,
    InsufficientStockError: 400,
    InvalidTransitionError: 409,
    NotFoundError: 404,
    StockRecordExistsError: 409,
    AccessDeniedError: 403,
    AuthenticationRequiredError: 401,
    ConcurrentUpdateError: 409,
}


def status_code_for(exc: BalloonStudioError) -> int:
    """Look up the status for an error, walking its class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500


async def balloon_studio_error_handler(request: Request, exc: BalloonStudioError) -> JSONResponse:
    """Map BalloonStudioError subclasses to appropriate HTTP responses."""
    status_code = status_code_for(exc)
    content: dict[str, Any] = {"detail": str(exc), "error_type": type(exc).__name__}

    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    if isinstance(exc, InsufficientStockError):
        content["lines"] = [shortage.to_dict() for shortage in exc.shortages]
    if isinstance(exc, InvalidTransitionError):
        content["current"] = exc.current
        content["requested"] = exc.requested

    logger.info(
        "request_rejected",
        path=request.url.path,
        status_code=status_code,
        error_type=type(exc).__name__,
        detail=str(exc),
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as validation errors."""
    errors = [
        {"field": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "error_type": "ValidationError", "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_type": "InternalError"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BalloonStudioError, balloon_studio_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

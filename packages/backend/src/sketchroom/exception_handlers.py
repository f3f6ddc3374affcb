"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain exceptions
and request validation failures to JSON responses.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sketchroom.errors import AuthenticationError, SketchroomError

logger = structlog.get_logger()


def _sketchroom_error_handler(request: Request, exc: SketchroomError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("request.failed", path=request.url.path, error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.error_code},
        headers=headers,
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Invalid input is a 400, not FastAPI's default 422."""
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid input",
            "code": "invalid_input",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Store and infrastructure failures. Details go to the log only."""
    logger.exception(
        "request.unhandled_error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "internal_error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SketchroomError, _sketchroom_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)

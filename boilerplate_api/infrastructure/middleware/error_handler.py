"""Global error handler middleware."""

from collections.abc import Iterable
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from boilerplate_api.domain.errors import (
    AppError,
    AuthError,
    DatabaseError,
    NotFoundError,
    ResponseSchemaError,
    ValidationError,
)
from boilerplate_api.infrastructure.telemetry.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_BODY = {
    "error": "INTERNAL_ERROR",
    "message": "An unexpected error occurred",
    "details": {},
}


def format_validation_errors(errors: Iterable[Any]) -> list[dict[str, Any]]:
    """Reduce pydantic error entries to JSON-safe ``loc``/``msg``/``type``."""
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]


def error_body(exc: AppError) -> dict[str, Any]:
    return {"error": exc.code, "message": exc.message, "details": exc.details}


def http_error_body(exc: StarletteHTTPException) -> dict[str, Any]:
    """Framework errors (unknown route, wrong method) in the application shape."""
    try:
        code = HTTPStatus(exc.status_code).name
    except ValueError:
        code = "HTTP_ERROR"
    message = exc.detail if isinstance(exc.detail, str) else code
    return {"error": code, "message": message, "details": {}}


def error_handler_middleware(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Handle all application errors."""
        status_code = _get_status_code(exc)

        if isinstance(exc, ResponseSchemaError):
            # Never leak any part of a payload that failed its own contract
            logger.error(
                f"Response schema violation: {exc.message}",
                extra={
                    "event": "api.response.invalid",
                    "error_details": exc.details,
                    "path": request.url.path,
                },
            )
            return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

        log_level = "warning" if status_code < 500 else "error"
        getattr(logger, log_level)(
            f"Application error: {exc.message}",
            extra={
                "error_code": exc.code,
                "error_details": exc.details,
                "retryable": exc.retryable,
                "path": request.url.path,
            },
        )

        return JSONResponse(status_code=status_code, content=error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Map framework-level validation failures to the application shape."""
        return await app_error_handler(
            request,
            ValidationError(details={"errors": format_validation_errors(exc.errors())}),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=http_error_body(exc),
            headers=exc.headers,
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Handle database failures without exposing driver messages."""
        logger.error(
            f"Database error: {exc}",
            extra={
                "event": "db.error",
                "path": request.url.path,
                "error_type": type(exc).__name__,
            },
        )

        return JSONResponse(status_code=500, content=error_body(DatabaseError()))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            f"Unhandled exception: {str(exc)}",
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )

        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


def _get_status_code(error: AppError) -> int:
    """Map error type to HTTP status code."""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthError):
        return 401
    return 500

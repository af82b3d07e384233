"""Exception handlers mapping errors to HTTP responses.

Every error leaves the API with the same body shape::

    {"code": "DUPLICATE_ROLE", "message": "...", "status": 409}

Exception mapping:
    DuplicateRoleError      -> 409 DUPLICATE_ROLE
    RoleNotFoundError       -> 404 ROLE_NOT_FOUND
    RoleValidationError     -> 400 INVALID_REQUEST
    RequestValidationError  -> 400 INVALID_REQUEST
    PersistenceError        -> 500 INTERNAL_ERROR
    anything else           -> 500 INTERNAL_ERROR

Internal error details never reach the client.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rolehex.core.logging import get_logger
from rolehex.domain.exceptions import (
    DuplicateRoleError,
    PersistenceError,
    RoleNotFoundError,
    RoleValidationError,
)
from rolehex.infrastructure.api.schemas import ErrorResponse

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build a JSON error response.

    Args:
        status_code: HTTP status code.
        code: Machine-readable error code.
        message: Human-readable error message.
    """
    body = ErrorResponse(code=code, message=message, status=status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _format_validation_errors(exc: RequestValidationError) -> str:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        details.append(f"{location}: {message}" if location else message)
    return "Validation failed: " + ", ".join(details)


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(DuplicateRoleError)
    async def duplicate_role_handler(request: Request, exc: DuplicateRoleError):
        logger.info(
            "Business exception occurred",
            method=request.method,
            path=request.url.path,
            error=exc.message,
        )
        return error_response(status.HTTP_409_CONFLICT, "DUPLICATE_ROLE", exc.message)

    @app.exception_handler(RoleNotFoundError)
    async def role_not_found_handler(request: Request, exc: RoleNotFoundError):
        logger.info(
            "Business exception occurred",
            method=request.method,
            path=request.url.path,
            error=exc.message,
        )
        return error_response(status.HTTP_404_NOT_FOUND, "ROLE_NOT_FOUND", exc.message)

    @app.exception_handler(RoleValidationError)
    async def role_validation_handler(request: Request, exc: RoleValidationError):
        logger.warning(
            "Validation exception occurred",
            method=request.method,
            path=request.url.path,
            error=exc.message,
        )
        return error_response(status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST", exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _format_validation_errors(exc)
        logger.warning(
            "Validation exception occurred",
            method=request.method,
            path=request.url.path,
            error=message,
        )
        return error_response(status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST", message)

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error(
            "Persistence exception occurred",
            method=request.method,
            path=request.url.path,
            error=exc.message,
            exc_info=exc,
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", GENERIC_ERROR_MESSAGE
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            method=request.method,
            path=request.url.path,
            error=str(exc),
            exc_type=type(exc).__name__,
            exc_info=exc,
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", GENERIC_ERROR_MESSAGE
        )

"""Maps error kinds to HTTP responses. The only place that knows about status codes."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cinereserva.core.errors import (
    ConflictError,
    InputValidationError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
)
from cinereserva.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"
INVALID_PAYLOAD_MESSAGE = "Datos de entrada inválidos"

# Conflicts are reported as 400 with their specific message, not 409.
_STATUS_BY_KIND: tuple[tuple[type[ServiceError], int], ...] = (
    (InputValidationError, 400),
    (ConflictError, 400),
    (NotFoundError, 404),
    (UnauthorizedError, 401),
)


def status_for(error: ServiceError) -> int:
    """HTTP status for *error*; anything unclassified is an internal failure."""
    for kind, status in _STATUS_BY_KIND:
        if isinstance(error, kind):
            return status
    return 500


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump(), headers=headers)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error(
            "Request failed with an internal error",
            exc_info=exc,
            extra={"path": request.url.path, "reason": exc.message[:500]},
        )
        return _error(500, INTERNAL_ERROR_MESSAGE)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return _error(status, exc.message, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected malformed request", extra={"path": request.url.path})
    return _error(400, INVALID_PAYLOAD_MESSAGE)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return _error(500, INTERNAL_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Install the {"error": message} response shape for every failure path."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

"""Translation of errors into plain-text HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from hospital.domain.exceptions import (
    AppointmentValidationError,
    ConstraintViolationError,
    StoreError,
    StoreUnavailableError,
)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> PlainTextResponse:
    """Malformed or incomplete request bodies are a 400, not FastAPI's default 422."""
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    logger.info("Rejected request body on {}: {}", request.url.path, message)
    return PlainTextResponse(message, status_code=status.HTTP_400_BAD_REQUEST)


async def appointment_validation_handler(request: Request, exc: Exception) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=status.HTTP_400_BAD_REQUEST)


async def constraint_violation_handler(request: Request, exc: Exception) -> PlainTextResponse:
    # Reported as 500, the same status as StoreUnavailableError
    logger.warning("Constraint violation on {}: {}", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def store_unavailable_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.warning("Store unavailable on {}: {}", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def store_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.warning("Store error on {}: {}", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    """Routing errors (404, 405) as plain text, keeping headers such as ``Allow``."""
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppointmentValidationError, appointment_validation_handler)
    app.add_exception_handler(ConstraintViolationError, constraint_violation_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

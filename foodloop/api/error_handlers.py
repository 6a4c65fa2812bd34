"""Error Handlers - every failure leaves the API in the FoodLoopError envelope.

Invariants:
    - Domain, request-validation and unexpected errors share one body shape:
      {"error": {code, message, category, severity, retryable, timestamp, context}}
    - Request validation failures become VALIDATION_ERROR (400) naming the first
      bad field, with every pydantic error under "details"
    - Retryable errors carry Retry-After (whole seconds, at least 1)
    - Unexpected exceptions never leak their message or type to the caller

Design Decisions:
    - Non-domain failures are converted into FoodLoopError instances so
      to_response() stays the only envelope builder
    - Retryable failures (conflict, store) log at ERROR; caller mistakes at WARNING
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from foodloop.core.errors import (
    ErrorCategory, ErrorSeverity, FoodLoopError, ValidationError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FoodLoopError, handle_foodloop_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)


def error_response(exc: FoodLoopError, extra_body: dict | None = None) -> JSONResponse:
    body = exc.to_response()
    if extra_body:
        body["error"].update(extra_body)
    headers = None
    retry_ms = exc.context.retry_after_ms
    if exc.retryable and retry_ms is not None:
        headers = {"Retry-After": str(max(1, -(-retry_ms // 1000)))}
    return JSONResponse(status_code=exc.http_status, content=body, headers=headers)


async def handle_foodloop_error(request: Request, exc: FoodLoopError) -> JSONResponse:
    logger.log(
        logging.ERROR if exc.retryable else logging.WARNING,
        f"{request.method} {request.url.path} failed: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "listing_id": exc.context.listing_id,
            "request_id": exc.context.request_id,
            "actor_role": exc.context.actor_role,
        },
    )
    return error_response(exc)


async def handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    first = details[0]["field"] if details else "request"
    logger.warning(
        f"Rejected malformed {request.method} {request.url.path}: {first}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    domain_error = ValidationError(f"Invalid value for '{first}'", first)
    return error_response(domain_error, {"details": details})


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        exc_info=exc,
    )
    internal = FoodLoopError(
        "An unexpected error occurred",
        "INTERNAL_ERROR",
        ErrorCategory.INTERNAL,
        ErrorSeverity.CRITICAL,
        None,
        500,
    )
    return error_response(internal)

"""Error Handlers: every failure leaves the API in the same {"error": {...}} envelope.

Invariants:
    - TempSchedError bodies come from its own to_response(); retryable ones
      (DatabaseError on lock timeout or lost connection) add Retry-After
    - Malformed request bodies are 400 VALIDATION_ERROR, the same code the
      scheduling rules use, with one details entry per pydantic error
    - Anything else is a 500 whose body says nothing about the cause; the
      traceback only goes to the log

Design Decisions:
    - Registered from main.py through register_error_handlers(app)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tempsched.core.errors import ErrorCategory, ErrorSeverity, TempSchedError

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 1


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TempSchedError, _handle_domain_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)


async def _handle_domain_error(request: Request, exc: TempSchedError):
    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "schedule_id": exc.context.schedule_id,
        },
    )
    headers = (
        {"Retry-After": str(RETRY_AFTER_SECONDS)} if exc.retryable else None
    )
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


async def _handle_request_validation(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning(
        f"Rejected request body on {request.url.path}: {len(errors)} error(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    details = [
        {
            "field": ".".join(str(part) for part in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in errors
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details,
        ),
    )


async def _handle_unexpected(request: Request, exc: Exception):
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    details: list[dict] | None = None,
) -> dict:
    body = {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
        "retryable": False,
    }
    if details is not None:
        body["details"] = details
    return {"error": body}

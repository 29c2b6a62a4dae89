"""Error Handlers — global exception handlers for the BART API.

Invariants:
    - BartError → structured JSON with error code, message, severity
    - RequestValidationError → 400 with one detail per rejected parameter
    - Exception (catch-all) → never leaks internal details
    - All three share the BartError envelope (code, message, category,
      severity, timestamp)

Design Decisions:
    - Three-layer handler: domain (BartError), validation (Pydantic), catch-all (Exception)
    - Kept out of main.py so tests can build a bare app with the same handlers
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from bart.core.errors import BartError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_bart_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_bart_error_handler(app: FastAPI) -> None:
    """Register BART domain/contract error handler."""

    @app.exception_handler(BartError)
    async def bart_error_handler(request: Request, exc: BartError):
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"BartError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "session_id": exc.context.session_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register request-parameter validation handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        details = _validation_details(exc)
        logger.warning(
            f"Rejected parameters on {request.url.path}: "
            + ", ".join(f"{d['location']}.{d['field']}" for d in details),
            extra={"error_code": "INVALID_PARAMETER", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_envelope(
                "INVALID_PARAMETER", "Invalid request parameters",
                ErrorCategory.VALIDATION, ErrorSeverity.WARNING,
                details=details,
            ),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
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
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    **extra,
) -> dict:
    """Same shape as BartError.to_response() for errors raised outside the core."""
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **extra,
        },
    }


def _validation_details(exc: RequestValidationError) -> list[dict]:
    """One entry per rejected parameter: where it came from and what was wrong.

    Routes only take path parameters, so loc is ("path", name); the location
    is split out and any remaining loc parts are joined as the field name.
    """
    details = []
    for e in exc.errors():
        location, *rest = e["loc"] or ("request",)
        details.append({
            "location": str(location),
            "field": ".".join(str(part) for part in rest),
            "message": e["msg"],
            "type": e["type"],
        })
    return details

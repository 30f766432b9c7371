"""Error Handlers — global exception handlers producing the failure envelope.

Invariants:
    - VidshareError → {statusCode, data: null, message, success: false, errors}
    - RequestValidationError → 400 with field-level errors
    - Starlette HTTPException (unknown route, wrong method) → same envelope, its own status
    - Exception (catch-all) → 500, never leaks internal details
    - TokenReuseDetectedError also clears the session cookies, forcing a new login

Design Decisions:
    - Four-layer handler: domain, validation, routing, catch-all
    - Extracted from main.py to keep the entry point small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidshare.api.auth_gate import clear_session_cookies
from vidshare.config import get_settings
from vidshare.core.errors import (
    ErrorSeverity, InternalError, TokenReuseDetectedError, VidshareError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(VidshareError)
    async def vidshare_error_handler(request: Request, exc: VidshareError):
        """Handle all vidshare domain/infrastructure errors."""
        log = logger.error if exc.severity in (
            ErrorSeverity.ERROR, ErrorSeverity.CRITICAL,
        ) else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        response = JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )
        if isinstance(exc, TokenReuseDetectedError):
            clear_session_cookies(response, get_settings())
        return response


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "statusCode": exc.status_code,
                "data": None,
                "message": message,
                "success": False,
                "errors": [{"code": "HTTP_ERROR"}],
            },
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=InternalError().to_response(),
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "statusCode": status.HTTP_400_BAD_REQUEST,
        "data": None,
        "message": "Invalid request data",
        "success": False,
        "errors": [
            {
                "code": "VALIDATION_ERROR",
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }

"""Error Handlers — global exception handlers for the marketplace API.

Invariants:
    - MarketplaceError → structured JSON with error code, message, severity
    - RequestValidationError → 400 with field-level error details
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (MarketplaceError), validation (Pydantic),
      catch-all (Exception)
    - Caller mistakes (4xx) log at WARNING, infrastructure faults (5xx) at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from gigmarket.core.errors import MarketplaceError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_marketplace_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_marketplace_error_handler(app: FastAPI) -> None:

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        """Handle all marketplace domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {type(exc).__name__}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }

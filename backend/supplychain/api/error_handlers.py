"""Error Handlers — global exception handlers for the gateway API.

Invariants:
    - SupplyChainError → {"error": message} with the error's http_status
    - RequestValidationError → 400 with field-level error details
    - Exception (catch-all) → 500, never leaks internal details
    - No classification here: kind → status was decided by the dispatcher

Design Decisions:
    - Three-layer handler: domain (SupplyChainError), validation (Pydantic), catch-all (Exception)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from supplychain.core.errors import ErrorSeverity, SupplyChainError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register dispatch/classification error handler."""

    @app.exception_handler(SupplyChainError)
    async def supplychain_error_handler(request: Request, exc: SupplyChainError):
        """Handle all classified and infrastructure errors."""
        critical = exc.severity == ErrorSeverity.CRITICAL
        log = logger.error if critical else logger.warning
        log(
            f"SupplyChainError: {exc.message}",
            extra={
                "error_code": exc.code,
                "error_kind": exc.kind.value,
                "status_code": exc.http_status,
                "path": request.url.path,
            },
            exc_info=exc if critical else None,
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

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


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "An unexpected error occurred"},
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    fields = sorted({
        str(e["loc"][-1]) for e in exc.errors() if e.get("loc")
    })
    return {
        "error": f"Invalid request data: {', '.join(fields)}" if fields
        else "Invalid request data",
        "details": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }

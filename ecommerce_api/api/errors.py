"""Error classification and exception handlers.

Maps domain exceptions, request validation failures, database integrity
errors and unknown routes onto the ``{success: false, error, message}``
envelope. Anything unclassified becomes a 500 whose message is hidden in
production.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ecommerce_api.domain.exceptions import (
    PARAMETER_MESSAGES,
    CatalogError,
    DuplicateKeyError,
    InvalidParameterError,
)
from ecommerce_api.infrastructure.config import settings

logger = structlog.get_logger()

AVAILABLE_ROUTES = {
    "products": "/api/products",
    "departments": "/api/departments",
    "health": "/health",
    "root": "/",
}


def error_body(
    request: Request,
    error: str,
    message: str,
    details: dict | None = None,
) -> dict:
    """Build the error envelope."""
    return {
        "success": False,
        "error": error,
        "message": message,
        "details": details or {},
        "request_id": getattr(request.state, "request_id", None),
    }


def catalog_error_response(request: Request, exc: CatalogError) -> JSONResponse:
    """Response for a classified domain error."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.error, exc.message, exc.details),
    )


def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Response for an unclassified error, logged with its traceback."""
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    message = "Something went wrong on our end" if settings.is_production else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(request, "Internal server error", message),
    )


def parameter_error(exc: RequestValidationError) -> InvalidParameterError:
    """Convert the first request validation failure into a parameter error."""
    errors = exc.errors()
    if not errors:
        return InvalidParameterError("request", message="Invalid request")

    first = errors[0]
    field = str(first["loc"][-1]) if first.get("loc") else "request"
    message = PARAMETER_MESSAGES.get(field, first.get("msg", "Invalid value"))
    return InvalidParameterError(field, message=message)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(CatalogError)
    async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
        if exc.status_code >= 500:
            return internal_error_response(request, exc)
        logger.info(
            "Request rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.error,
        )
        return catalog_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return catalog_error_response(request, parameter_error(exc))

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("Integrity error", path=request.url.path, error=str(exc.orig))
        return catalog_error_response(request, DuplicateKeyError())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            body = error_body(
                request,
                "Route not found",
                f"Cannot {request.method} {request.url.path}",
            )
            body["availableRoutes"] = AVAILABLE_ROUTES
            return JSONResponse(status_code=exc.status_code, content=body)

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, "Request failed", str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

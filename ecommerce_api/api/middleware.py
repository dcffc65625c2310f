"""API middleware for the catalog API.

Provides the request interceptors mounted through the pipeline:
- Request ID correlation
- Access logging
- Error handling
- Payload size guard
"""

import time
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ecommerce_api.api.errors import error_body, internal_error_response
from ecommerce_api.api.pipeline import CallNext, InterceptorChain, PipelineMiddleware
from ecommerce_api.infrastructure.config import settings

logger = structlog.get_logger()


# ============================================================================
# Request ID
# ============================================================================


class RequestIdInterceptor:
    """Adds a request ID for correlation.

    Generates or extracts a request ID and adds it to:
    - Request state for access in handlers
    - Response headers for client correlation
    - Log context for tracing
    """

    HEADER_NAME = "X-Request-ID"

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[self.HEADER_NAME] = request_id
        return response


# ============================================================================
# Access Log
# ============================================================================


class AccessLogInterceptor:
    """Logs every request with its status and duration."""

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        start_time = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                query=dict(request.query_params) or None,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round(duration_ms, 2),
            )


# ============================================================================
# Error Handling
# ============================================================================


class ErrorInterceptor:
    """Catches unhandled exceptions and returns the 500 envelope."""

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return internal_error_response(request, exc)


# ============================================================================
# Payload Size Guard
# ============================================================================


class PayloadSizeInterceptor:
    """Rejects request bodies larger than the configured limit."""

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        content_length = request.headers.get("content-length")
        if content_length is not None:
            if not content_length.isdigit():
                return JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content=error_body(request, "Invalid request", "Malformed Content-Length header"),
                )
            if int(content_length) > self.max_bytes:
                logger.warning(
                    "Payload too large",
                    path=request.url.path,
                    content_length=int(content_length),
                    limit=self.max_bytes,
                )
                return JSONResponse(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    content=error_body(
                        request,
                        "Payload too large",
                        f"Request body cannot exceed {self.max_bytes} bytes",
                    ),
                )
        return await call_next(request)


# ============================================================================
# Middleware Setup
# ============================================================================


def build_chain() -> InterceptorChain:
    """Interceptors in execution order."""
    return InterceptorChain(
        [
            RequestIdInterceptor(),
            AccessLogInterceptor(),
            ErrorInterceptor(),
            PayloadSizeInterceptor(settings.max_payload_bytes),
        ]
    )


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    Middleware is added in reverse order (last added = first executed).

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(PipelineMiddleware, chain=build_chain())

    # CORS (outermost - answers preflight requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "X-Request-ID"],
    )

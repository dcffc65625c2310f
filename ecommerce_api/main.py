"""E-commerce API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, exception handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI

from ecommerce_api.api import (
    admin_router,
    departments_router,
    health_router,
    products_router,
    reference_router,
)
from ecommerce_api.api.errors import setup_exception_handlers
from ecommerce_api.api.middleware import setup_middleware
from ecommerce_api.infrastructure.config import settings
from ecommerce_api.infrastructure.database import engine
from ecommerce_api.infrastructure.logging import configure_logging

configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting E-commerce API",
        version=settings.api_version,
        environment=settings.environment,
        debug=settings.debug,
    )

    yield

    logger.info("Shutting down E-commerce API")
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="E-commerce API",
        description="Product catalog, departments and reference data",
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    setup_middleware(app)
    setup_exception_handlers(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(products_router)
    app.include_router(departments_router)
    app.include_router(admin_router)
    app.include_router(reference_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ecommerce_api.main:app",
        host="0.0.0.0",
        port=3000,
        reload=settings.debug,
    )

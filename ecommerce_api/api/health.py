"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ecommerce_api.api.dependencies import SessionDep
from ecommerce_api.api.schemas import HealthResponse, RootResponse
from ecommerce_api.infrastructure.config import settings
from ecommerce_api.infrastructure.database import is_connected

router = APIRouter()

_started_at = time.monotonic()


@router.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    """Service banner."""
    return RootResponse(
        message="E-commerce API is running!",
        version=settings.api_version,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(session: SessionDep) -> HealthResponse:
    """Check service health.

    Returns:
        Health status with database connectivity and uptime.
    """
    connected = await is_connected(session)
    return HealthResponse(
        status="OK",
        service="ecommerce-api",
        version=settings.api_version,
        database="Connected" if connected else "Disconnected",
        uptime=round(time.monotonic() - _started_at, 3),
    )


@router.get("/ready")
async def readiness_check(session: SessionDep) -> JSONResponse:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status, 503 while the database is unreachable.
    """
    if await is_connected(session):
        return JSONResponse(content={"status": "ready"})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unavailable", "database": "Disconnected"},
    )

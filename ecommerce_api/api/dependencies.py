"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce_api.catalog.service import CatalogService
from ecommerce_api.infrastructure.config import settings
from ecommerce_api.infrastructure.database import get_session

SessionDep = Annotated[AsyncSession, Depends(get_session)]

# Bounds are documented in the schema only; the service rejects
# out-of-range values with its own messages.
PageQuery = Annotated[
    int,
    Query(description="Page number (≥ 1)", json_schema_extra={"minimum": 1}),
]
LimitQuery = Annotated[
    int,
    Query(
        description=f"Items per page (1-{settings.max_page_size})",
        json_schema_extra={"minimum": 1, "maximum": settings.max_page_size},
    ),
]


def get_catalog_service(session: SessionDep) -> CatalogService:
    """Get catalog service bound to the request session."""
    return CatalogService(session)


CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]

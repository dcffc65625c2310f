"""Department API endpoints.

- GET /api/departments - departments with product roll-ups
- GET /api/departments/{id} - price statistics and top brands
- GET /api/departments/{id}/products - products in a department (paginated)
"""

from typing import Annotated

from fastapi import APIRouter, Query

from ecommerce_api.api.dependencies import CatalogServiceDep, LimitQuery, PageQuery
from ecommerce_api.api.schemas import (
    DepartmentDetailResponse,
    DepartmentDetailSchema,
    DepartmentListItem,
    DepartmentListResponse,
    DepartmentProductsResponse,
    ErrorResponse,
    PaginationSchema,
    ProductSchema,
)
from ecommerce_api.catalog.service import PaginationParams
from ecommerce_api.infrastructure.config import settings

router = APIRouter(prefix="/api/departments", tags=["Departments"])

DEPARTMENT_ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.get("", response_model=DepartmentListResponse)
async def list_departments(
    service: CatalogServiceDep,
    include_stats: Annotated[bool, Query(alias="includeStats")] = False,
    include_inactive: Annotated[bool, Query(alias="includeInactive")] = False,
    sort: Annotated[str, Query(description="name, -name, product_count or -product_count")] = "name",
) -> DepartmentListResponse:
    """List departments with product count and average price."""
    summaries = await service.list_departments(sort=sort, include_inactive=include_inactive)
    return DepartmentListResponse(
        departments=[
            DepartmentListItem.from_summary(summary, include_stats) for summary in summaries
        ],
        total=len(summaries),
    )


@router.get("/{department_id}", response_model=DepartmentDetailResponse, responses=DEPARTMENT_ERRORS)
async def get_department(department_id: str, service: CatalogServiceDep) -> DepartmentDetailResponse:
    """Department details with price statistics and top brands."""
    detail = await service.get_department_detail(department_id)
    return DepartmentDetailResponse(data=DepartmentDetailSchema.from_detail(detail))


@router.get(
    "/{department_id}/products",
    response_model=DepartmentProductsResponse,
    responses=DEPARTMENT_ERRORS,
)
async def list_department_products(
    department_id: str,
    service: CatalogServiceDep,
    page: PageQuery = 1,
    limit: LimitQuery = settings.default_page_size,
) -> DepartmentProductsResponse:
    """Products in a department, sorted by name."""
    department, result = await service.list_department_products(
        department_id,
        PaginationParams(page=page, limit=limit),
    )
    return DepartmentProductsResponse(
        department=department.name,
        department_id=department.id,
        products=[ProductSchema.model_validate(product) for product in result.items],
        pagination=PaginationSchema.from_result(result),
    )

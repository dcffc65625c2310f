"""Product API endpoints.

Provides endpoints for browsing the catalog:
- GET /api/products - list products (paginated, filtered)
- GET /api/products/categories - category breakdown
- GET /api/products/brands - brand breakdown
- GET /api/products/{id} - product details with profit figures
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ecommerce_api.api.dependencies import CatalogServiceDep, LimitQuery, PageQuery
from ecommerce_api.api.schemas import (
    BrandListResponse,
    BrandSummarySchema,
    CategoryListResponse,
    CategorySummarySchema,
    ErrorResponse,
    PaginationSchema,
    ProductDetailResponse,
    ProductDetailSchema,
    ProductListResponse,
    ProductSchema,
)
from ecommerce_api.catalog.service import PaginationParams, ProductFilter
from ecommerce_api.infrastructure.config import settings

router = APIRouter(prefix="/api/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def product_filter(
    category: Annotated[str | None, Query(description="Category substring")] = None,
    brand: Annotated[str | None, Query(description="Brand substring")] = None,
    department: Annotated[str | None, Query(description="Department name")] = None,
    min_price: Annotated[float | None, Query(alias="minPrice")] = None,
    max_price: Annotated[float | None, Query(alias="maxPrice")] = None,
    search: Annotated[str | None, Query(description="Matches name, category or brand")] = None,
) -> ProductFilter:
    """Collect filter query parameters; empty strings mean no filter."""
    return ProductFilter(
        category=category or None,
        brand=brand or None,
        department=department or None,
        min_price=min_price,
        max_price=max_price,
        search=search or None,
    )


FilterDep = Annotated[ProductFilter, Depends(product_filter)]


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_products(
    service: CatalogServiceDep,
    filters: FilterDep,
    page: PageQuery = 1,
    limit: LimitQuery = settings.default_page_size,
) -> ProductListResponse:
    """List products with filtering and pagination."""
    result = await service.list_products(filters, PaginationParams(page=page, limit=limit))

    return ProductListResponse(
        data=[ProductSchema.model_validate(product) for product in result.items],
        pagination=PaginationSchema.from_result(result),
        filters=filters.echo(),
    )


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(
    service: CatalogServiceDep,
    filters: FilterDep,
    limit: Annotated[int | None, Query(description="Keep only the top N categories")] = None,
) -> CategoryListResponse:
    """Categories with product count and average price, most common first."""
    rows = await service.category_summary(filters, limit=limit)
    return CategoryListResponse(
        data=[CategorySummarySchema(**row) for row in rows],
        total=len(rows),
    )


@router.get("/brands", response_model=BrandListResponse)
async def list_brands(
    service: CatalogServiceDep,
    filters: FilterDep,
    limit: Annotated[int | None, Query(description="Keep only the top N brands")] = None,
) -> BrandListResponse:
    """Top brands with product count and average price."""
    rows = await service.brand_summary(filters, limit=limit)
    return BrandListResponse(
        data=[BrandSummarySchema(**row) for row in rows],
        total=len(rows),
    )


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_product(product_id: str, service: CatalogServiceDep) -> ProductDetailResponse:
    """Get a product by natural ID or surrogate ID."""
    product = await service.get_product(product_id)
    return ProductDetailResponse(data=ProductDetailSchema.model_validate(product))

"""API schemas for the catalog API.

Pydantic models for response serialization. Envelope and statistics
fields are camelCase on the wire; product fields keep the column names
of the source data.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ecommerce_api.catalog.service import DepartmentDetail, DepartmentSummary, PaginatedResult


class CamelModel(BaseModel):
    """Base for schemas serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(..., description="Short error title")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional error context")
    request_id: str | None = Field(default=None, description="Request ID for correlation")


class PaginationSchema(CamelModel):
    """Pagination metadata."""

    current_page: int = Field(..., description="Current page number (1-based)")
    total_pages: int = Field(..., description="Total number of pages")
    total_items: int = Field(..., description="Total number of matching items")
    items_per_page: int = Field(..., description="Items per page")
    has_next: bool = Field(..., description="Whether a next page exists")
    has_prev: bool = Field(..., description="Whether a previous page exists")

    @classmethod
    def from_result(cls, result: PaginatedResult[Any]) -> "PaginationSchema":
        """Build pagination metadata from a paginated result."""
        return cls(
            current_page=result.page,
            total_pages=result.total_pages,
            total_items=result.total,
            items_per_page=result.limit,
            has_next=result.has_next,
            has_prev=result.has_prev,
        )


# ============================================================================
# Product Schemas
# ============================================================================


class DepartmentRefSchema(BaseModel):
    """Department embedded in a product."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None


class ProductSchema(BaseModel):
    """Product representation."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    object_id: str = Field(
        ...,
        validation_alias=AliasChoices("_id", "object_id"),
        serialization_alias="_id",
        description="Surrogate identifier",
    )
    id: str = Field(..., description="Natural product identifier")
    sku: str
    name: str
    category: str
    brand: str
    cost: float
    retail_price: float
    department: str | None = Field(default=None, description="Legacy department label")
    department_id: str | None = Field(default=None, description="Canonical department reference")
    distribution_center_id: str
    department_info: DepartmentRefSchema | None = Field(
        default=None,
        validation_alias=AliasChoices("departmentInfo", "department_info"),
        serialization_alias="departmentInfo",
    )


class ProductDetailSchema(ProductSchema):
    """Product with derived profit figures."""

    profit_margin: float = Field(
        ...,
        validation_alias=AliasChoices("profitMargin", "profit_margin"),
        serialization_alias="profitMargin",
    )
    profit_percentage: float | None = Field(
        default=None,
        validation_alias=AliasChoices("profitPercentage", "profit_percentage"),
        serialization_alias="profitPercentage",
        description="Margin relative to cost; null when cost is 0",
    )


class ProductListResponse(CamelModel):
    """Paginated list of products."""

    success: bool = True
    data: list[ProductSchema]
    pagination: PaginationSchema
    filters: dict[str, Any] = Field(default_factory=dict, description="Applied filters")


class ProductDetailResponse(CamelModel):
    """Single product."""

    success: bool = True
    data: ProductDetailSchema


class CategorySummarySchema(CamelModel):
    """Category with product count and average price."""

    category: str
    count: int
    avg_price: float | None


class BrandSummarySchema(CamelModel):
    """Brand with product count and average price."""

    brand: str
    count: int
    avg_price: float | None


class CategoryListResponse(CamelModel):
    """Category breakdown."""

    success: bool = True
    data: list[CategorySummarySchema]
    total: int


class BrandListResponse(CamelModel):
    """Brand breakdown."""

    success: bool = True
    data: list[BrandSummarySchema]
    total: int


# ============================================================================
# Department Schemas
# ============================================================================


class DepartmentListItem(CamelModel):
    """Department with its product roll-up.

    ``product_count`` keeps its snake_case key for existing clients.
    """

    id: str
    name: str
    description: str | None = None
    is_active: bool
    product_count: int = Field(..., serialization_alias="product_count")
    avg_price: float | None = None
    min_price: float | None = Field(default=None, description="Only with includeStats")
    max_price: float | None = Field(default=None, description="Only with includeStats")

    @classmethod
    def from_summary(cls, summary: DepartmentSummary, include_stats: bool) -> "DepartmentListItem":
        """Build a list item from a service summary."""
        department = summary.department
        return cls(
            id=department.id,
            name=department.name,
            description=department.description,
            is_active=department.is_active,
            product_count=summary.product_count,
            avg_price=summary.avg_price,
            min_price=summary.min_price if include_stats else None,
            max_price=summary.max_price if include_stats else None,
        )


class DepartmentListResponse(CamelModel):
    """List of departments."""

    success: bool = True
    departments: list[DepartmentListItem]
    total: int


class BrandCountSchema(CamelModel):
    """Brand occurrence count."""

    brand: str
    count: int


class DepartmentDetailSchema(CamelModel):
    """Department with price statistics and top brands."""

    id: str
    name: str
    description: str | None = None
    is_active: bool
    product_count: int
    avg_price: float | None = None
    min_price: float | None = None
    max_price: float | None = None
    top_brands: list[BrandCountSchema] = Field(default_factory=list)

    @classmethod
    def from_detail(cls, detail: DepartmentDetail) -> "DepartmentDetailSchema":
        """Build the schema from a service detail object."""
        department = detail.department
        return cls(
            id=department.id,
            name=department.name,
            description=department.description,
            is_active=department.is_active,
            product_count=detail.product_count,
            avg_price=detail.avg_price,
            min_price=detail.min_price,
            max_price=detail.max_price,
            top_brands=[BrandCountSchema(**brand) for brand in detail.top_brands or []],
        )


class DepartmentDetailResponse(CamelModel):
    """Single department."""

    success: bool = True
    data: DepartmentDetailSchema


class DepartmentProductsResponse(CamelModel):
    """Paginated products of one department."""

    success: bool = True
    department: str = Field(..., description="Department name")
    department_id: str
    products: list[ProductSchema]
    pagination: PaginationSchema


# ============================================================================
# Admin and Reference Schemas
# ============================================================================


class MigrationResponse(CamelModel):
    """Result of a department migration run."""

    success: bool = True
    message: str
    results: dict[str, Any]


class ReferenceListResponse(CamelModel):
    """Paginated list of reference records."""

    success: bool = True
    data: list[dict[str, Any]]
    pagination: PaginationSchema


# ============================================================================
# Service Schemas
# ============================================================================


class RootResponse(BaseModel):
    """Service banner."""

    message: str
    version: str
    timestamp: str


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str
    database: str
    uptime: float

"""Catalog service for product and department queries.

High-level service that combines repository operations with
request validation and the department read-path fallback.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Generic, TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce_api.catalog.models import Department, Product
from ecommerce_api.catalog.repository import DepartmentRepository, ProductRepository
from ecommerce_api.domain.exceptions import InvalidParameterError, NotFoundError
from ecommerce_api.domain.value_objects import ObjectId
from ecommerce_api.infrastructure.config import settings

T = TypeVar("T")

logger = structlog.get_logger()

DEPARTMENT_SORTS = {
    "name": ("name", False),
    "-name": ("name", True),
    "product_count": ("product_count", False),
    "-product_count": ("product_count", True),
}


@dataclass
class ProductFilter:
    """Filter parameters for product search.

    Attributes:
        category: Case-insensitive substring of the category.
        brand: Case-insensitive substring of the brand.
        department: Department name, resolved through the fallback chain.
        min_price: Minimum retail price.
        max_price: Maximum retail price.
        search: Text search in name, category and brand.
    """

    category: str | None = None
    brand: str | None = None
    department: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    search: str | None = None

    def validate(self) -> None:
        """Reject negative prices and inverted ranges.

        Raises:
            InvalidParameterError: On the first offending parameter.
        """
        for field, value in (("minPrice", self.min_price), ("maxPrice", self.max_price)):
            if value is not None and (not math.isfinite(value) or value < 0):
                raise InvalidParameterError(field)
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise InvalidParameterError(
                "minPrice",
                message="minPrice cannot be greater than maxPrice",
                error="Invalid price range",
            )

    def echo(self) -> dict[str, Any]:
        """Applied filters as returned to the client."""
        data = asdict(self)
        return {
            "category": data["category"],
            "brand": data["brand"],
            "department": data["department"],
            "minPrice": data["min_price"],
            "maxPrice": data["max_price"],
            "search": data["search"],
        }


@dataclass
class PaginationParams:
    """Pagination parameters.

    Attributes:
        page: Page number (1-indexed).
        limit: Items per page.
    """

    page: int = 1
    limit: int = 10

    def validate(self, max_limit: int | None = None) -> None:
        """Check page and limit bounds.

        Args:
            max_limit: Largest accepted limit, defaults to ``settings.max_page_size``.

        Raises:
            InvalidParameterError: If page < 1, limit < 1 or limit > max_limit.
        """
        max_limit = max_limit or settings.max_page_size
        if self.page < 1:
            raise InvalidParameterError("page")
        if self.limit < 1:
            raise InvalidParameterError("limit")
        if self.limit > max_limit:
            raise InvalidParameterError(
                "limit",
                message=f"Limit cannot exceed {max_limit} items per page",
            )

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.limit

    def past_end(self, total: int) -> bool:
        """Check whether the page starts after the last of ``total`` items.

        Such pages are empty and are never sent to the database, whose
        integer offsets cannot hold arbitrarily large page numbers.
        """
        return self.offset >= total


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: List of items.
        total: Total count.
        page: Current page.
        limit: Items per page.
    """

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total + self.limit - 1) // self.limit

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1


@dataclass
class DepartmentSummary:
    """A department with its product roll-up."""

    department: Department
    product_count: int
    avg_price: float | None
    min_price: float | None = None
    max_price: float | None = None


@dataclass
class DepartmentDetail(DepartmentSummary):
    """Department roll-up including its most frequent brands."""

    top_brands: list[dict[str, Any]] | None = None


class CatalogService:
    """Service for catalog read operations.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session)
            results = await service.list_products(
                ProductFilter(brand="levi", max_price=80),
                PaginationParams(page=2, limit=20),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.products = ProductRepository(session)
        self.departments = DepartmentRepository(session)

    async def _filter_kwargs(self, filters: ProductFilter) -> dict[str, Any]:
        """Translate a ProductFilter into repository filter arguments.

        The department filter resolves to canonical department ids when the
        name matches a Department, and to the legacy label otherwise.
        Products without a department_id always match on their label.
        """
        kwargs: dict[str, Any] = {
            "category": filters.category,
            "brand": filters.brand,
            "min_price": filters.min_price,
            "max_price": filters.max_price,
            "search": filters.search,
        }
        if filters.department:
            kwargs["department_label"] = filters.department
            department_ids = await self.departments.find_ids_by_name(filters.department)
            if department_ids:
                kwargs["department_ids"] = department_ids
            else:
                logger.debug(
                    "Department filter fell back to legacy label",
                    department=filters.department,
                )
        return kwargs

    async def list_products(
        self,
        filters: ProductFilter,
        pagination: PaginationParams,
    ) -> PaginatedResult[Product]:
        """Search products with filters and pagination.

        Args:
            filters: Filter parameters.
            pagination: Pagination parameters.

        Returns:
            Paginated product results.

        Raises:
            InvalidParameterError: If pagination or price filters are invalid.
        """
        pagination.validate()
        filters.validate()

        kwargs = await self._filter_kwargs(filters)
        total = await self.products.count(**kwargs)
        products = []
        if not pagination.past_end(total):
            products = await self.products.find_all(
                limit=pagination.limit,
                offset=pagination.offset,
                **kwargs,
            )

        return PaginatedResult(
            items=list(products),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )

    async def get_product(self, product_id: str) -> Product:
        """Get product by natural ID, falling back to the surrogate ID.

        Args:
            product_id: Natural ID or 24-hex surrogate ID.

        Returns:
            The product.

        Raises:
            InvalidParameterError: If the ID is blank.
            NotFoundError: If neither lookup resolves.
        """
        product_id = product_id.strip()
        if not product_id:
            raise InvalidParameterError(
                "id",
                message="Product ID is required",
                error="Invalid product ID",
            )

        product = await self.products.get_by_natural_id(product_id)
        if product is None and ObjectId.is_valid(product_id):
            product = await self.products.get_by_object_id(product_id)

        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    async def category_summary(
        self,
        filters: ProductFilter | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Categories with product count and average price, most common first."""
        return await self._summary("category", filters, limit)

    async def brand_summary(
        self,
        filters: ProductFilter | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Top brands with product count and average price."""
        if limit is None:
            limit = settings.brand_summary_limit
        return await self._summary("brand", filters, limit)

    async def _summary(
        self,
        field: str,
        filters: ProductFilter | None,
        limit: int | None,
    ) -> list[dict[str, Any]]:
        if limit is not None and limit < 1:
            raise InvalidParameterError("limit")
        filters = filters or ProductFilter()
        filters.validate()
        kwargs = await self._filter_kwargs(filters)
        return await self.products.summarize(field, limit=limit, **kwargs)

    async def list_departments(
        self,
        sort: str = "name",
        include_inactive: bool = False,
    ) -> list[DepartmentSummary]:
        """Departments with product count and average price.

        Args:
            sort: One of "name", "-name", "product_count", "-product_count".
            include_inactive: Also list inactive departments.

        Raises:
            InvalidParameterError: If the sort key is unknown.
        """
        if sort not in DEPARTMENT_SORTS:
            raise InvalidParameterError(
                "sort",
                message=f"sort must be one of: {', '.join(DEPARTMENT_SORTS)}",
            )
        sort_by, descending = DEPARTMENT_SORTS[sort]

        rows = await self.departments.list_with_stats(
            include_inactive=include_inactive,
            sort_by=sort_by,
            descending=descending,
        )
        return [DepartmentSummary(**row) for row in rows]

    async def get_department(self, department_id: str) -> Department:
        """Get a department by its surrogate ID.

        Raises:
            InvalidIdError: If the ID is not 24 hex characters.
            NotFoundError: If no department has that ID.
        """
        object_id = ObjectId.from_string(department_id, entity_type="department")
        department = await self.departments.get_by_id(str(object_id))
        if department is None:
            raise NotFoundError("Department", department_id)
        return department

    async def get_department_detail(self, department_id: str) -> DepartmentDetail:
        """Department with price statistics and top brands."""
        department = await self.get_department(department_id)
        stats = await self.products.department_stats(department)
        top_brands = await self.products.top_brands(
            department, limit=settings.department_top_brands
        )
        return DepartmentDetail(department=department, top_brands=top_brands, **stats)

    async def list_department_products(
        self,
        department_id: str,
        pagination: PaginationParams,
    ) -> tuple[Department, PaginatedResult[Product]]:
        """Paginated products of one department, sorted by name."""
        pagination.validate()
        department = await self.get_department(department_id)

        stats = await self.products.department_stats(department)
        total = stats["product_count"]
        products = []
        if not pagination.past_end(total):
            products = await self.products.find_by_department(
                department,
                limit=pagination.limit,
                offset=pagination.offset,
            )

        return department, PaginatedResult(
            items=list(products),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )

"""Catalog repositories for database operations.

Provides query operations for products and departments with filtering,
sorting, pagination and grouped statistics.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce_api.catalog.models import Department, Product

SUMMARY_FIELDS = {
    "category": Product.category,
    "brand": Product.brand,
}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains(column: Any, term: str) -> ColumnElement[bool]:
    """Case-insensitive literal substring match."""
    return column.ilike(f"%{_escape_like(term)}%", escape="\\")


def _legacy_label_matches(name: Any) -> ColumnElement[bool]:
    return and_(
        Product.department_id.is_(None),
        func.lower(func.trim(Product.department)) == func.lower(name),
    )


def department_scope(department: Department) -> ColumnElement[bool]:
    """Products belonging to a department.

    Matches the relational reference first; products that have not been
    backfilled yet fall back to their legacy label.
    """
    return or_(
        Product.department_id == department.id,
        _legacy_label_matches(department.name),
    )


class ProductRepository:
    """Repository for Product database operations.

    Handles all database interactions for products including
    filtering, sorting, pagination and aggregation.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            products = await repo.find_all(
                category="jeans",
                min_price=10.0,
                limit=20,
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save_all(self, products: list[Product]) -> list[Product]:
        """Save multiple products to database.

        Args:
            products: Products to save.

        Returns:
            Saved products.
        """
        self.session.add_all(products)
        await self.session.flush()
        return products

    async def get_by_natural_id(self, product_id: str) -> Product | None:
        """Get product by its natural (source data) ID."""
        result = await self.session.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def get_by_object_id(self, object_id: str) -> Product | None:
        """Get product by its surrogate ID."""
        return await self.session.get(Product, object_id.lower())

    def _build_conditions(
        self,
        category: str | None = None,
        brand: str | None = None,
        department_ids: list[str] | None = None,
        department_label: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        search: str | None = None,
    ) -> list[ColumnElement[bool]]:
        conditions = []

        if category:
            conditions.append(contains(Product.category, category))

        if brand:
            conditions.append(contains(Product.brand, brand))

        if department_ids:
            relational = Product.department_id.in_(department_ids)
            if department_label:
                # Rows not backfilled yet still match on their label
                relational = or_(
                    relational,
                    and_(
                        Product.department_id.is_(None),
                        contains(Product.department, department_label),
                    ),
                )
            conditions.append(relational)
        elif department_label:
            conditions.append(contains(Product.department, department_label))

        if min_price is not None:
            conditions.append(Product.retail_price >= min_price)

        if max_price is not None:
            conditions.append(Product.retail_price <= max_price)

        if search:
            conditions.append(
                or_(
                    contains(Product.name, search),
                    contains(Product.category, search),
                    contains(Product.brand, search),
                )
            )

        return conditions

    async def find_all(
        self,
        limit: int = 10,
        offset: int = 0,
        **filters: Any,
    ) -> Sequence[Product]:
        """Find products with filtering and pagination, newest first.

        Args:
            limit: Maximum results.
            offset: Result offset for pagination.
            **filters: Filter values, see ``_build_conditions``.

        Returns:
            Sequence of matching products.
        """
        query = select(Product)

        conditions = self._build_conditions(**filters)
        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(Product.created_at.desc(), Product.object_id.desc())
        query = query.limit(limit).offset(offset)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self, **filters: Any) -> int:
        """Count products matching filters.

        Returns:
            Count of matching products.
        """
        query = select(func.count(Product.object_id))

        conditions = self._build_conditions(**filters)
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return result.scalar_one()

    async def summarize(
        self,
        field: str,
        limit: int | None = None,
        **filters: Any,
    ) -> list[dict[str, Any]]:
        """Group products by a field with count and average retail price.

        Args:
            field: Either "category" or "brand".
            limit: Keep only the top N groups by count.
            **filters: Filter values, see ``_build_conditions``.

        Returns:
            Group dicts sorted by count descending.
        """
        column = SUMMARY_FIELDS[field]
        product_count = func.count(Product.object_id).label("count")

        query = select(
            column.label("value"),
            product_count,
            func.avg(Product.retail_price).label("avg_price"),
        ).group_by(column)

        conditions = self._build_conditions(**filters)
        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(product_count.desc(), column.asc())
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return [
            {
                field: row.value,
                "count": row.count,
                "avg_price": _round(row.avg_price),
            }
            for row in result.all()
        ]

    async def find_by_department(
        self,
        department: Department,
        limit: int = 10,
        offset: int = 0,
    ) -> Sequence[Product]:
        """Products in a department, sorted by name."""
        query = (
            select(Product)
            .where(department_scope(department))
            .order_by(Product.name.asc(), Product.object_id.asc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def department_stats(self, department: Department) -> dict[str, Any]:
        """Product count and price statistics for a department."""
        query = select(
            func.count(Product.object_id).label("count"),
            func.avg(Product.retail_price).label("avg_price"),
            func.min(Product.retail_price).label("min_price"),
            func.max(Product.retail_price).label("max_price"),
        ).where(department_scope(department))

        row = (await self.session.execute(query)).one()
        return {
            "product_count": row.count,
            "avg_price": _round(row.avg_price),
            "min_price": _round(row.min_price),
            "max_price": _round(row.max_price),
        }

    async def top_brands(self, department: Department, limit: int = 5) -> list[dict[str, Any]]:
        """Most frequent brands in a department."""
        brand_count = func.count(Product.object_id).label("count")
        query = (
            select(Product.brand, brand_count)
            .where(department_scope(department))
            .group_by(Product.brand)
            .order_by(brand_count.desc(), Product.brand.asc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [{"brand": row.brand, "count": row.count} for row in result.all()]

    # ------------------------------------------------------------------
    # Department backfill support
    # ------------------------------------------------------------------

    async def distinct_legacy_departments(self) -> list[str]:
        """Distinct non-null legacy department labels, as stored."""
        query = (
            select(Product.department)
            .where(Product.department.is_not(None))
            .distinct()
            .order_by(Product.department)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_unassigned_batch(
        self,
        after: str | None,
        limit: int,
    ) -> list[tuple[str, str]]:
        """Next batch of products without department_id but with a legacy label.

        Batches are keyed on the surrogate id so rows updated by a previous
        batch never shift the window.

        Returns:
            ``(object_id, department)`` pairs ordered by object_id.
        """
        query = select(Product.object_id, Product.department).where(
            Product.department_id.is_(None),
            Product.department.is_not(None),
        )
        if after is not None:
            query = query.where(Product.object_id > after)
        query = query.order_by(Product.object_id).limit(limit)

        result = await self.session.execute(query)
        return [(row.object_id, row.department) for row in result.all()]

    async def assign_department(self, object_ids: list[str], department_id: str) -> int:
        """Set department_id on products that still lack one.

        Returns:
            Number of rows updated.
        """
        if not object_ids:
            return 0
        statement = (
            update(Product)
            .where(
                Product.object_id.in_(object_ids),
                Product.department_id.is_(None),
            )
            .values(department_id=department_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        return result.rowcount or 0

    async def count_with_department(self) -> int:
        """Products that carry a department_id."""
        query = select(func.count(Product.object_id)).where(Product.department_id.is_not(None))
        return (await self.session.execute(query)).scalar_one()

    async def count_missing_department(self) -> int:
        """Products with a non-empty legacy label but no department_id."""
        query = select(func.count(Product.object_id)).where(
            Product.department_id.is_(None),
            Product.department.is_not(None),
            func.trim(Product.department) != "",
        )
        return (await self.session.execute(query)).scalar_one()

    async def sample_migrated(self, limit: int = 5) -> Sequence[Product]:
        """A few products carrying a department_id."""
        query = (
            select(Product)
            .where(Product.department_id.is_not(None))
            .order_by(Product.object_id)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalars().all()


class DepartmentRepository:
    """Repository for Department database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, department: Department) -> Department:
        """Save a department to database."""
        self.session.add(department)
        await self.session.flush()
        return department

    async def get_by_id(self, department_id: str) -> Department | None:
        """Get department by ID."""
        return await self.session.get(Department, department_id)

    async def get_by_name(self, name: str) -> Department | None:
        """Get department by exact name."""
        result = await self.session.execute(select(Department).where(Department.name == name))
        return result.scalar_one_or_none()

    async def find_ids_by_name(self, term: str) -> list[str]:
        """IDs of departments whose name contains the term, ignoring case."""
        result = await self.session.execute(
            select(Department.id).where(contains(Department.name, term))
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        """Count all departments."""
        result = await self.session.execute(select(func.count(Department.id)))
        return result.scalar_one()

    async def list_with_stats(
        self,
        include_inactive: bool = False,
        sort_by: str = "name",
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Departments joined to their products with count and price stats.

        Args:
            include_inactive: Also list departments with ``is_active`` false.
            sort_by: "name" or "product_count".
            descending: Reverse the sort order.

        Returns:
            One dict per department.
        """
        membership = or_(
            Product.department_id == Department.id,
            _legacy_label_matches(Department.name),
        )
        product_count = func.count(Product.object_id).label("product_count")

        query = (
            select(
                Department,
                product_count,
                func.avg(Product.retail_price).label("avg_price"),
                func.min(Product.retail_price).label("min_price"),
                func.max(Product.retail_price).label("max_price"),
            )
            .outerjoin(Product, membership)
            .group_by(Department.id)
        )

        if not include_inactive:
            query = query.where(Department.is_active.is_(True))

        sort_column = product_count if sort_by == "product_count" else Department.name
        query = query.order_by(
            sort_column.desc() if descending else sort_column.asc(),
            Department.name.asc(),
        )

        result = await self.session.execute(query)
        return [
            {
                "department": row.Department,
                "product_count": row.product_count,
                "avg_price": _round(row.avg_price),
                "min_price": _round(row.min_price),
                "max_price": _round(row.max_price),
            }
            for row in result.all()
        ]


def _round(value: float | None) -> float | None:
    return None if value is None else round(float(value), 2)

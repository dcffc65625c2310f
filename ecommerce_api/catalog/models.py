"""SQLAlchemy models for product catalog.

Defines Product and Department tables for persistent storage.

Products carry both the legacy free-text ``department`` label and the
normalized ``department_id`` reference while the department backfill is
in progress; see ``ecommerce_api.catalog.migration``.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from ecommerce_api.domain.exceptions import EntityValidationError
from ecommerce_api.domain.value_objects import new_object_id
from ecommerce_api.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _strip(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else value


class Department(Base):
    """Canonical grouping entity for products.

    Attributes:
        id: Surrogate identifier (24 hex characters).
        name: Unique department name, trimmed.
        description: Free-text description.
        is_active: Whether the department is listed by default.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "departments"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Department(id={self.id}, name={self.name})>"

    @validates("name")
    def _validate_name(self, key: str, value: str | None) -> str:
        value = _strip(value)
        if not value:
            raise EntityValidationError("Department", key, "Department name is required")
        return value

    @validates("description")
    def _validate_description(self, key: str, value: str | None) -> str | None:
        return _strip(value)


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        object_id: Surrogate identifier (24 hex characters), serialized as ``_id``.
        id: Natural product identifier from the source data.
        sku: Stock Keeping Unit (unique).
        name: Product name.
        category: Category label.
        brand: Brand name.
        cost: Unit cost.
        retail_price: Retail price.
        department: Legacy department label, kept until the backfill completes.
        department_id: Reference to the canonical department.
        distribution_center_id: Distribution center holding the product.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    object_id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    sku: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    brand: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    cost: Mapped[float] = mapped_column(Float, nullable=False)
    retail_price: Mapped[float] = mapped_column(Float, nullable=False)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    department_id: Mapped[str | None] = mapped_column(
        String(24),
        ForeignKey("departments.id"),
        nullable=True,
        index=True,
    )
    distribution_center_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # Relationships
    department_info: Mapped["Department | None"] = relationship("Department", lazy="selectin")

    __table_args__ = (
        Index("ix_products_category_brand", "category", "brand"),
        Index("ix_products_department_id_category", "department_id", "category"),
        Index("ix_products_department_category", "department", "category"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, sku={self.sku}, name={self.name[:30]}...)>"

    @validates("name")
    def _validate_name(self, key: str, value: str | None) -> str:
        value = _strip(value)
        if not value:
            raise EntityValidationError("Product", key, "Product name cannot be empty")
        return value

    @validates("sku", "category", "brand", "department")
    def _validate_label(self, key: str, value: str | None) -> str | None:
        return _strip(value)

    @validates("cost", "retail_price")
    def _validate_amount(self, key: str, value: float) -> float:
        if value is None or value < 0:
            label = "Cost" if key == "cost" else "Retail price"
            raise EntityValidationError("Product", key, f"{label} cannot be negative")
        return value

    @property
    def profit_margin(self) -> float:
        """Retail price minus cost, rounded to cents."""
        return round(self.retail_price - self.cost, 2)

    @property
    def profit_percentage(self) -> float | None:
        """Margin relative to cost in percent, None when cost is zero."""
        if not self.cost:
            return None
        return round((self.retail_price - self.cost) / self.cost * 100, 2)

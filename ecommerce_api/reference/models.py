"""SQLAlchemy models for reference entities.

Users, orders and the flat records produced by the bulk loaders. These
tables are read-only from the API's point of view; validators enforce
the same rules the loaders are expected to respect.
"""

import re
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from ecommerce_api.domain.exceptions import EntityValidationError
from ecommerce_api.domain.value_objects import new_object_id
from ecommerce_api.infrastructure.database import Base

GENDERS = ("M", "F", "Other", "male", "female", "other")
TRAFFIC_SOURCES = ("Search", "Email", "Social", "Direct", "Referral", "Organic", "Display", "Facebook")
ORDER_STATUSES = ("Processing", "Shipped", "Complete", "Cancelled", "Returned")

EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _check_range(entity: str, key: str, value: float | None, low: float, high: float, label: str):
    if value is not None and not low <= value <= high:
        raise EntityValidationError(entity, key, f"{label} must be between {low:g} and {high:g}")
    return value


def _check_choice(entity: str, key: str, value: str | None, choices: tuple[str, ...]):
    if value is not None:
        value = value.strip()
        if value not in choices:
            raise EntityValidationError(
                entity, key, f"{key} must be one of: {', '.join(choices)}"
            )
    return value


class User(Base):
    """Storefront customer."""

    __tablename__ = "users"

    object_id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    street_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    traffic_source: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )

    __table_args__ = (Index("ix_users_state_city", "state", "city"),)

    @validates("first_name", "last_name")
    def _validate_name(self, key: str, value: str | None) -> str:
        value = value.strip() if value else value
        if not value:
            raise EntityValidationError("User", key, f"{key} is required")
        return value

    @validates("email")
    def _validate_email(self, key: str, value: str | None) -> str:
        value = (value or "").strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise EntityValidationError("User", key, "Please enter a valid email")
        return value

    @validates("age")
    def _validate_age(self, key: str, value: int | None) -> int | None:
        return _check_range("User", key, value, 0, 150, "Age")

    @validates("latitude")
    def _validate_latitude(self, key: str, value: float | None) -> float | None:
        return _check_range("User", key, value, -90, 90, "Latitude")

    @validates("longitude")
    def _validate_longitude(self, key: str, value: float | None) -> float | None:
        return _check_range("User", key, value, -180, 180, "Longitude")

    @validates("gender")
    def _validate_gender(self, key: str, value: str | None) -> str | None:
        return _check_choice("User", key, value, GENDERS)

    @validates("traffic_source")
    def _validate_traffic_source(self, key: str, value: str | None) -> str | None:
        return _check_choice("User", key, value, TRAFFIC_SOURCES)


class Order(Base):
    """Customer order header.

    Timestamps must be ordered: shipped and returned not before created,
    delivered not before shipped.
    """

    __tablename__ = "orders"

    object_id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    order_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Processing", index=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )
    returned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    shipped_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    num_of_item: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_orders_user_created", "user_id", "created_at"),
        Index("ix_orders_status_created", "status", "created_at"),
    )

    @validates("status")
    def _validate_status(self, key: str, value: str) -> str:
        return _check_choice("Order", key, value, ORDER_STATUSES)

    @validates("gender")
    def _validate_gender(self, key: str, value: str | None) -> str | None:
        return _check_choice("Order", key, value, GENDERS)

    @validates("num_of_item")
    def _validate_num_of_item(self, key: str, value: int) -> int:
        if value is None or value < 1:
            raise EntityValidationError("Order", key, "Order must contain at least 1 item")
        return value

    @validates("created_at", "shipped_at", "returned_at", "delivered_at")
    def _validate_timestamps(self, key: str, value: datetime | None) -> datetime | None:
        if value is None:
            return value
        value = _as_utc(value)

        created_at = self.created_at
        if key in ("shipped_at", "returned_at") and created_at and value < _as_utc(created_at):
            label = "Ship" if key == "shipped_at" else "Return"
            raise EntityValidationError("Order", key, f"{label} date cannot be before creation date")

        if key == "delivered_at" and self.shipped_at and value < _as_utc(self.shipped_at):
            raise EntityValidationError("Order", key, "Delivery date cannot be before ship date")

        if key == "created_at":
            for later in ("shipped_at", "returned_at"):
                other = getattr(self, later)
                if other is not None and _as_utc(other) < value:
                    raise EntityValidationError(
                        "Order", key, "Creation date cannot be after ship or return date"
                    )
        return value


class OrderItem(Base):
    """Line of an order as produced by the loaders."""

    __tablename__ = "order_items"

    object_id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    order_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    product_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    inventory_item_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    shipped_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    returned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class InventoryItem(Base):
    """Stock unit with a denormalized copy of its product."""

    __tablename__ = "inventory_items"

    object_id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    product_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sold_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    product_category: Mapped[str | None] = mapped_column(String(200), nullable=True)
    product_name: Mapped[str | None] = mapped_column(String(500), nullable=True)
    product_brand: Mapped[str | None] = mapped_column(String(200), nullable=True)
    product_retail_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    product_department: Mapped[str | None] = mapped_column(String(100), nullable=True)
    product_sku: Mapped[str | None] = mapped_column(String(100), nullable=True)
    product_distribution_center_id: Mapped[str | None] = mapped_column(String(64), nullable=True)


class DistributionCenter(Base):
    """Warehouse location."""

    __tablename__ = "distribution_centers"

    object_id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

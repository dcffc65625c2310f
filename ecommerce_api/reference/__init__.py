"""Reference entities: users, orders and loader-produced records."""

from ecommerce_api.reference.models import (
    DistributionCenter,
    InventoryItem,
    Order,
    OrderItem,
    User,
)
from ecommerce_api.reference.repository import ReferenceRepository

__all__ = [
    "DistributionCenter",
    "InventoryItem",
    "Order",
    "OrderItem",
    "ReferenceRepository",
    "User",
]

"""Paginated listings for reference entities."""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce_api.reference.models import Order, User

ModelT = TypeVar("ModelT", User, Order)


class ReferenceRepository(Generic[ModelT]):
    """Read-only paging over one reference table.

    Rows are returned in insertion order of their surrogate id.
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    async def find_page(self, limit: int, offset: int) -> Sequence[ModelT]:
        query = (
            select(self.model)
            .order_by(self.model.object_id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(self.model.object_id)))
        return result.scalar_one()


def users(session: AsyncSession) -> ReferenceRepository[User]:
    """Repository over the users table."""
    return ReferenceRepository(session, User)


def orders(session: AsyncSession) -> ReferenceRepository[Order]:
    """Repository over the orders table."""
    return ReferenceRepository(session, Order)


def to_dict(instance: Any) -> dict[str, Any]:
    """Column values keyed by column name, surrogate id as ``_id``."""
    data = {column.key: getattr(instance, column.key) for column in instance.__mapper__.column_attrs}
    data["_id"] = data.pop("object_id")
    return data

"""Shared fixtures.

Every test gets its own in-memory SQLite database; the application's
session dependency is overridden to use it.
"""

from collections.abc import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

import ecommerce_api.reference.models  # noqa: F401
from ecommerce_api.catalog.migration import DepartmentMigration
from ecommerce_api.catalog.models import Product
from ecommerce_api.infrastructure.database import Base, get_session
from ecommerce_api.main import app

# natural id, name, category, brand, cost, retail price, legacy department
CATALOG = [
    ("1", "Classic Denim Jacket", "Outerwear & Coats", "Levi's", 40.0, 89.99, "Women"),
    ("2", "Slim Fit Jeans", "Jeans", "Levi's", 25.0, 59.5, "Men"),
    ("3", "Wool Sweater", "Sweaters", "Calvin Klein", 30.0, 75.0, "Women"),
    ("4", "Running Shorts", "Active", "Nike", 10.0, 25.0, "Men"),
    ("5", "Kids Hoodie", "Sweaters", "Nike", 0.0, 19.99, "Kids"),
    ("6", "Summer Dress", "Dresses", "Calvin Klein", 20.0, 120.0, "Women"),
]


def build_product(
    natural_id: str,
    name: str = "Basic Tee",
    category: str = "Tops & Tees",
    brand: str = "Acme",
    cost: float = 5.0,
    retail_price: float = 15.0,
    department: str | None = "Women",
) -> Product:
    """Build a product with a legacy department label and no department_id."""
    return Product(
        id=natural_id,
        sku=f"SKU-{natural_id}",
        name=name,
        category=category,
        brand=brand,
        cost=cost,
        retail_price=retail_price,
        department=department,
        distribution_center_id="1",
    )


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Factory for products outside the sample catalog."""
    return build_product


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and asserting test data."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app over ASGI."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, str]:
    """Insert the sample catalog.

    Returns:
        Mapping of natural product id to surrogate id.
    """
    async with session_factory() as session:
        products = [
            build_product(
                natural_id,
                name=name,
                category=category,
                brand=brand,
                cost=cost,
                retail_price=retail_price,
                department=department,
            )
            for natural_id, name, category, brand, cost, retail_price, department in CATALOG
        ]
        session.add_all(products)
        await session.commit()
        return {product.id: product.object_id for product in products}


@pytest.fixture
async def migrated(
    seeded: dict[str, str],
    session_factory: async_sessionmaker[AsyncSession],
) -> dict[str, str]:
    """Sample catalog with departments backfilled."""
    async with session_factory() as session:
        await DepartmentMigration(session).run()
    return seeded

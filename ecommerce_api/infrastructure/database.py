"""Database engine and session management.

One async engine per process, a session per request through
``get_session``, and helpers shared by the CLI scripts.
"""

from collections.abc import AsyncGenerator
from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from ecommerce_api.infrastructure.config import settings

logger = structlog.get_logger()


def build_engine(url: str) -> AsyncEngine:
    """Create the async engine for a database URL.

    SQLite URLs get no pool sizing, since SQLite pools hold a single connection.

    Args:
        url: SQLAlchemy database URL with an async driver.

    Returns:
        Configured AsyncEngine.
    """
    options: dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    if make_url(url).get_backend_name() != "sqlite":
        options["pool_size"] = settings.database_pool_size
    return create_async_engine(url, **options)


engine = build_engine(settings.database_url)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for models
Base = declarative_base()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a request-scoped database session.

    Commits when the request succeeds and rolls back when it raises.

    Yields:
        AsyncSession for database operations.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def is_connected(session: AsyncSession) -> bool:
    """Ping the database through a session.

    A failed ping is rolled back so the session stays usable.
    """
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Database ping failed", error=str(exc))
        await session.rollback()
        return False
    return True


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    # Model modules register their tables on Base.metadata
    import ecommerce_api.catalog.models  # noqa: F401
    import ecommerce_api.reference.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

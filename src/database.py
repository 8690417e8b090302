"""
Async database engine and sessions for Family Calendar.

Provides:
- async_engine built from DATABASE_URL (aiosqlite or asyncpg driver)
- AsyncSessionLocal factory
- get_async_session() dependency for request-scoped sessions
- init_db() / dispose_engine() lifecycle helpers
"""

import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

if settings.is_production:
    settings.validate_production_config()


def _get_async_database_url(sync_url: str) -> str:
    """Swap a plain SQLite/PostgreSQL URL to its async driver."""
    lowered = sync_url.lower()
    if lowered.startswith("sqlite:///"):
        return "sqlite+aiosqlite:///" + sync_url[len("sqlite:///"):]
    if lowered.startswith("postgresql://"):
        return "postgresql+asyncpg://" + sync_url[len("postgresql://"):]
    return sync_url


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """Family members and events cascade with their family only when FKs are on."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for(settings: Settings) -> AsyncEngine:
    """Build the async engine for the configured database."""
    url = _get_async_database_url(settings.database_url)
    echo = settings.log_level == "DEBUG"

    if not settings.uses_postgresql:
        engine = create_async_engine(url, echo=echo)
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        url,
        pool_size=5,
        pool_recycle=3600,  # seconds
        pool_pre_ping=True,
        echo=echo,
    )


async_engine = create_engine_for(settings)

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for a request-scoped async session.

    The family store commits its own writes; anything still pending when
    the request ends is committed, and rolled back on error.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Create all tables.

    For development (DATABASE_AUTO_CREATE=true); deployments use Alembic.
    """
    from src.models.base import Base

    logger.info("Creating database tables...")
    async with async_engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def dispose_engine() -> None:
    """Close all pooled connections. Called on application shutdown."""
    await async_engine.dispose()
    logger.info("Database engine disposed")

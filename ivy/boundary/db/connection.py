"""
Database connection management.

Provides the async SQLAlchemy engine, session factory and table creation
for the session store.

Dependencies: sqlalchemy, ivy.configs
System role: Database connection lifecycle management
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from ivy.boundary.db.base import Base
from ivy.configs.database import DatabaseSettings

logger = logging.getLogger(__name__)


def get_async_engine(settings: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Pool sizing applies to PostgreSQL only; SQLite uses the default pool.
    pool_pre_ping=True verifies connections before use to detect stale
    connections early.

    Args:
        settings: Database settings

    Returns:
        AsyncEngine: Configured async engine
    """
    if settings.is_sqlite:
        return create_async_engine(settings.async_database_url, echo=settings.echo_sql)

    return create_async_engine(
        settings.async_database_url,
        echo=settings.echo_sql,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory bound to the engine.

    expire_on_commit=False keeps loaded attributes readable after commit.

    Args:
        engine: Async engine

    Returns:
        async_sessionmaker: Session factory
    """
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all registered tables if they do not exist.

    Args:
        engine: Async engine
    """
    # Import models so they register with Base.metadata
    from ivy.boundary.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_tables - Tables ensured")

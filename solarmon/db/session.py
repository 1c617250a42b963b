"""
Async database engine and session factory.

Uses SQLAlchemy 2.x async engine; the default URL targets SQLite via
aiosqlite, PostgreSQL works through asyncpg. The engine and session factory
are owned by a ``Database`` instance created in the application lifespan and
kept on ``app.state`` rather than in module globals.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from solarmon.db.models import Base

logger = logging.getLogger(__name__)


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    For file-backed SQLite URLs the parent directory is created first.

    Args:
        database_url: SQLAlchemy async URL.

    Returns:
        AsyncEngine: Configured async engine.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_async_engine(database_url, echo=False)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to ``engine``.

    Args:
        engine: The async engine.

    Returns:
        async_sessionmaker: Factory for creating AsyncSession instances.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Database:
    """Engine plus session factory for one application instance.

    Args:
        database_url: SQLAlchemy async URL.
    """

    def __init__(self, database_url: str) -> None:
        self.engine = create_engine(database_url)
        self.session_factory = create_session_factory(self.engine)

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield an async session; closed when the caller is done.

        Yields:
            AsyncSession: An async SQLAlchemy session.
        """
        async with self.session_factory() as session:
            yield session

"""
Database Session Management

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: engine configuration lives in the adapter
- Async session management: Proper async context management
- Error handling: Automatic rollback on exceptions
- Schema bootstrap: create_all for development and tests
"""

import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shorturl.core.setting import settings
from shorturl.db import models  # noqa: F401  registers tables on SQLModel.metadata
from shorturl.db.sqlite_adapter import get_database_adapter

logger = logging.getLogger(__name__)

db_adapter = get_database_adapter()

engine = db_adapter.create_engine(
    settings.DATABASE_URL
)


def make_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """Build a session factory for ``bind`` configured the way the service expects."""
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,  # Entries stay readable after the flow commits
        autoflush=False,
    )


async_session_maker = make_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    Commits on success, rolls back on exception and closes
    the session when the request is done.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(bind: AsyncEngine = None) -> None:
    """Create all tables that do not exist yet."""
    bind = bind or engine
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ensured")


async def drop_tables(bind: AsyncEngine = None) -> None:
    """Drop all tables. Used by tests."""
    bind = bind or engine
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)


async def check_database(session: AsyncSession) -> bool:
    """Return True if a trivial query succeeds on ``session``."""
    try:
        await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        await session.rollback()
        logger.warning(f"Database health check failed: {e}")
        return False

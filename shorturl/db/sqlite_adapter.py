"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

Key characteristics:
- File-based (single .db file)
- Single writer at a time (file locking)
- Concurrent writers wait on the lock for up to the busy timeout
"""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from shorturl.core.setting import settings
from shorturl.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    Every session gets its own connection (NullPool), so two open
    transactions never share a connection and SQLite's database lock
    serializes the counter increments between them.
    """

    def __init__(self, busy_timeout: Optional[float] = None):
        """
        Args:
            busy_timeout: Seconds to wait on a locked database
                (defaults to settings.SQLITE_BUSY_TIMEOUT)
        """
        self.busy_timeout = settings.SQLITE_BUSY_TIMEOUT if busy_timeout is None else busy_timeout

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create SQLite async engine with appropriate configuration.

        Args:
            database_url: SQLite connection string (sqlite+aiosqlite:///...)
            **kwargs: Additional engine options (merged with SQLite defaults)

        Returns:
            Configured AsyncEngine for SQLite
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        return create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False,
            "timeout": self.busy_timeout,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }


def get_database_adapter() -> DatabaseAdapter:
    """
    Factory function to get the database adapter.

    Returns:
        DatabaseAdapter instance (SQLite)
    """
    return SQLiteAdapter()

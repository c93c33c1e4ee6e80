"""
Application Lifecycle

Prepares the database when the application starts and releases it on shutdown.

Startup:
- Creates missing tables (when CREATE_TABLES_ON_STARTUP is set)
- Ensures the code counter row exists

Failures are logged, not raised: the service still starts and reports
the database as unavailable through /health and 503 responses.
"""

import logging

from shorturl.core.setting import settings
from shorturl.db.session import async_session_maker, create_tables, engine
from shorturl.services.counter_allocator import CounterAllocator

logger = logging.getLogger(__name__)

_database_ready: bool = False


def is_database_ready() -> bool:
    """Whether the last startup initialization succeeded."""
    return _database_ready


async def initialize_database() -> None:
    """Create tables and the counter row."""
    global _database_ready

    try:
        if settings.CREATE_TABLES_ON_STARTUP:
            await create_tables()

        async with async_session_maker() as session:
            allocator = CounterAllocator(session)
            await allocator.ensure_counter()
            next_code = await allocator.peek()

        _database_ready = True
        logger.info(
            f"Connection to database successful: "
            f"counter={settings.COUNTER_NAME}, next_code={next_code}"
        )
    except Exception as e:
        _database_ready = False
        logger.error(f"Failed to initialize database: {str(e)}", exc_info=True)


async def shutdown_database() -> None:
    """Dispose of the engine's connections."""
    global _database_ready

    logger.info("Closing database engine")
    await engine.dispose()
    _database_ready = False

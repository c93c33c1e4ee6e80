"""
Test configuration and fixtures.

Every test gets freshly created tables in a temporary SQLite file.
The environment is set before the application is imported, so the
module-level engine already points at the test database.
"""

import asyncio
import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="shorturl-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["VERIFY_DOMAIN"] = "false"
os.environ["COUNTER_START"] = "1"
os.environ["ATOMIC_REGISTRATION"] = "true"
os.environ["CREATE_TABLES_ON_STARTUP"] = "true"

import pytest
from fastapi.testclient import TestClient

from shorturl.db.session import async_session_maker, create_tables, drop_tables
from shorturl.main import app


@pytest.fixture
async def session_maker():
    """Session factory bound to empty tables."""
    await drop_tables()
    await create_tables()
    yield async_session_maker
    await drop_tables()


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def client():
    """
    Test client running the app's startup and shutdown hooks.

    Startup recreates the tables and the counter row.
    """
    asyncio.run(drop_tables())
    with TestClient(app) as test_client:
        yield test_client
    asyncio.run(drop_tables())


@pytest.fixture
def sample_urls():
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]

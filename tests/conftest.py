"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real database. Every test gets freshly created tables, which
are dropped again when the test finishes.
"""

import os

# Must be set before station_ledger is imported: the application
# engine is built from this URL at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from station_ledger.main import app
from station_ledger.models import Base
from station_ledger.models.base import enable_sqlite_savepoints, get_db


TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"


@pytest.fixture
async def engine():
    """
    Engine bound to the current test's event loop.

    Tables are created before the test and dropped after it, so
    each test starts with an empty ledger.
    """
    test_engine = create_async_engine(TEST_DATABASE_URL)
    enable_sqlite_savepoints(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine):
    """Provide a database session for direct service testing."""
    session_factory = async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session):
    """
    Provide an HTTP client wired to the test database.

    get_db is overridden so every request in the test shares
    the test session.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

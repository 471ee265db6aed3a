"""
Users Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for error-path tests (no DB needed)
    ├── db_engine: async SQLite engine on a temp file with the users table created;
    │              installed as the app's session factory for the test
    ├── db_session: a session on db_engine for direct UserService tests
    ├── seed_users: inserts a known set of rows
    ├── row_count: async callable counting users rows
    └── test_client: HTTPX AsyncClient for API endpoint testing
"""

import os
from unittest.mock import AsyncMock, MagicMock

# Override settings BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app import database
from app.database import Base
from app.models.user import User


SEED_USERS = [
    {"name": "Alice Smith", "email": "alice@example.com", "age": 31},
    {"name": "Bob Jones", "email": "bob@example.com", "age": 45},
    {"name": "Carol White", "email": "carol@Example.org", "age": 27},
    {"name": "Dave Brown", "email": "dave@example.com", "age": 52},
    {"name": "Eve Black", "email": "eve@sample.net", "age": 19},
    {"name": "Malice Green", "email": "mg@sample.net", "age": 38},
]


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        with pytest.raises(DatabaseError):
            await UserService(mock_db_session).create_user(payload)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path, monkeypatch):
    """
    A fresh SQLite database per test, wired into get_db_session.

    The app's module-level factory is swapped for one bound to this engine,
    so requests through test_client run the real session dependency.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(database, "async_session_factory", factory)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """A session on the per-test database, committed by the test as needed."""
    async with database.async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seed_users(db_engine):
    """Insert SEED_USERS (ids 1..6 in order) and return them."""
    async with database.async_session_factory() as session:
        for data in SEED_USERS:
            session.add(User(**data))
        await session.commit()
    return SEED_USERS


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Usage:
        async def test_list(test_client, seed_users):
            response = await test_client.get("/users")
            assert response.status_code == 200
    """
    from app.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def row_count(db_engine):
    """Async callable returning the users row count, read outside any request."""

    async def _count() -> int:
        async with db_engine.connect() as conn:
            result = await conn.execute(select(func.count()).select_from(User))
            return result.scalar()

    return _count

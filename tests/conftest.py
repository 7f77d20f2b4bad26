"""Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite database with the tables created
from the ORM metadata. HTTP tests talk to the app through ASGITransport
with the database dependency pointed at that same database.
"""

import os
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# Set testing mode BEFORE importing the app
os.environ["TESTING"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from alert_profiles.config import settings

settings.testing = True

from alert_profiles.database import build_engine, get_db
from alert_profiles.main import app
from alert_profiles.models import AlertType, Base
from alert_profiles.services.alert_type import get_or_create_default_alert_type

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = build_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for each test."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def default_alert_type(db_session) -> AlertType:
    return await get_or_create_default_alert_type(db_session)


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing the API."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()

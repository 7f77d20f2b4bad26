"""Database connection and session management.

The engine is created lazily so it binds to the event loop that first
uses it. In-memory SQLite (tests) gets a single shared connection so
every session sees the same database; file databases and servers get a
connection pool.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from alert_profiles.config import settings
from alert_profiles.models.base import Base

_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    if not _is_sqlite(url):
        return False
    parsed = make_url(url)
    return parsed.database in (None, "", ":memory:") or parsed.query.get("mode") == "memory"


def build_engine(url: str) -> AsyncEngine:
    """Create an async engine with pooling suited to the backend."""
    echo = settings.log_format == "text" and settings.log_level.upper() == "DEBUG"
    if _is_memory_sqlite(url):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    if settings.testing:
        # Use NullPool for testing to avoid event loop issues
        return create_async_engine(url, echo=echo, poolclass=NullPool)
    if _is_sqlite(url):
        return create_async_engine(url, echo=echo)
    return create_async_engine(
        url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )


def get_engine() -> AsyncEngine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        _engine = build_engine(settings.database_url)
    return _engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get or create the session maker."""
    global _session_maker
    if _session_maker is None:
        _session_maker = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    async with get_session_maker()() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables() -> None:
    """Create missing tables from the ORM metadata.

    Used for SQLite development databases; PostgreSQL deployments are
    migrated with Alembic instead.
    """
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_database_connection() -> bool:
    """
    Check if the database is reachable.

    Returns:
        True if database is connected, False otherwise.
    """
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True
    except Exception:
        return False


async def close_database() -> None:
    """Dispose the engine and forget the session maker."""
    global _engine, _session_maker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_maker = None

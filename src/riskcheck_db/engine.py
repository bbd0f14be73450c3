"""Async SQLAlchemy engine and session factory.

The engine is created lazily on first call and reused across the process
lifetime.  Call ``dispose_engine()`` during graceful shutdown.

PostgreSQL (asyncpg) is the production store.  Any other async URL, such as
``sqlite+aiosqlite:///riskcheck.db`` for local development, is accepted; pool
sizing only applies to PostgreSQL.
"""

import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from riskcheck_db.config import get_async_url
from riskcheck_db.models.base import Base

# Connection pool tuning, overridable via PG_POOL_SIZE / PG_MAX_OVERFLOW.
_POOL_SIZE = int(os.getenv("PG_POOL_SIZE", "5"))
_MAX_OVERFLOW = int(os.getenv("PG_MAX_OVERFLOW", "10"))
_ECHO = os.getenv("DB_ECHO", "").lower() in ("1", "true", "yes")

# Module-level singleton so the entire app shares one connection pool.
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def build_engine(url: str) -> AsyncEngine:
    """Create a new async engine for ``url`` with the configured pool settings."""
    kwargs: dict = {"echo": _ECHO}
    if url.startswith("postgresql"):
        kwargs.update(pool_size=_POOL_SIZE, max_overflow=_MAX_OVERFLOW, pool_pre_ping=True)
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``.

    ``expire_on_commit=False`` keeps recorded sessions readable after the
    request transaction commits.
    """
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


def get_engine() -> AsyncEngine:
    """Return (and lazily create) the singleton async engine."""
    global _engine
    if _engine is None:
        _engine = build_engine(get_async_url())
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return (and lazily create) the async session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = build_session_factory(get_engine())
    return _session_factory


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create all tables from the ORM metadata.

    For local development and tests only; production schemas are managed by
    the Alembic migrations under ``riskcheck_db/migrations``.
    """
    # Import models so Base.metadata knows about their tables.
    import riskcheck_db.models.session  # noqa: F401

    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the engine's connection pool (call on app shutdown)."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None

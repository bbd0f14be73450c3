"""Database configuration — reads connection parameters from environment.

Supports two modes:
1. A single ``DATABASE_URL`` env var (takes precedence).  PostgreSQL URLs
   are normalised to the right driver; other async URLs (e.g.
   ``sqlite+aiosqlite:///riskcheck.db`` for local development) pass through.
2. Individual ``PG_HOST``, ``PG_PORT``, ``PG_USER``, ``PG_PASSWORD``,
   ``PG_DATABASE`` env vars (convenient for docker-compose).

``get_sync_url`` is used by Alembic migrations, ``get_async_url`` by the
async SQLAlchemy engine at runtime.
"""

import os

# Async driver suffix -> the sync dialect Alembic should use instead.
_SYNC_DRIVERS: dict[str, str] = {
    "postgresql+asyncpg://": "postgresql://",
    "sqlite+aiosqlite://": "sqlite://",
}


def _build_url_from_parts() -> str:
    """Construct a PostgreSQL connection string from individual env vars."""
    host = os.getenv("PG_HOST", "localhost")
    port = os.getenv("PG_PORT", "5432")
    user = os.getenv("PG_USER", "riskcheck")
    password = os.getenv("PG_PASSWORD", "riskcheck")
    database = os.getenv("PG_DATABASE", "riskcheck")
    return f"postgresql://{user}:{password}@{host}:{port}/{database}"


def get_sync_url() -> str:
    """Return a synchronous connection URL for Alembic."""
    url = os.getenv("DATABASE_URL") or _build_url_from_parts()
    for async_prefix, sync_prefix in _SYNC_DRIVERS.items():
        if url.startswith(async_prefix):
            return sync_prefix + url[len(async_prefix):]
    return url


def get_async_url() -> str:
    """Return an async connection URL (asyncpg for PostgreSQL)."""
    url = os.getenv("DATABASE_URL") or _build_url_from_parts()
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url

"""Alembic environment for the risk_sessions schema.

The connection URL always comes from ``riskcheck_db.config`` (``DATABASE_URL``
or the ``PG_*`` variables) converted to its synchronous driver, unless a
one-off URL is passed on the command line::

    alembic -x url=sqlite:///riskcheck.db upgrade head

SQLite cannot ALTER most constraints in place, so migrations against it run
in batch mode.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

import riskcheck_db.models.session  # noqa: F401  (registers risk_sessions on Base.metadata)
from riskcheck_db.config import get_sync_url
from riskcheck_db.models.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _resolve_url() -> str:
    """Command-line ``-x url=...`` wins over the environment."""
    return context.get_x_argument(as_dictionary=True).get("url") or get_sync_url()


def _configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline(url: str) -> None:
    """Emit the migration SQL to stdout without connecting."""
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online(url: str) -> None:
    """Connect with a throwaway engine and apply pending revisions."""
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = url
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options(url))
        with context.begin_transaction():
            context.run_migrations()


_url = _resolve_url()
if context.is_offline_mode():
    run_migrations_offline(_url)
else:
    run_migrations_online(_url)

"""Alembic environment for the vault schema.

The database URL comes from ``VAULT_DATABASE_URL`` (falling back to the
server's default SQLite file). Async driver URLs are migrated through an
async engine, plain URLs through a sync one.
"""

import asyncio
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import create_async_engine

from vault_api.db.tables import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

_ASYNC_DRIVERS = {"aiosqlite", "asyncpg"}


def _database_url() -> str:
    url = os.environ.get("VAULT_DATABASE_URL") or config.get_main_option(
        "sqlalchemy.url"
    )
    if url:
        return url
    from vault_api.config import get_settings

    return get_settings().effective_database_url


def _is_async(url: str) -> bool:
    return make_url(url).get_driver_name() in _ASYNC_DRIVERS


def _do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def _run_async_migrations(url: str) -> None:
    connectable = create_async_engine(url, poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(_do_run_migrations)
    await connectable.dispose()


def run_migrations_offline() -> None:
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = _database_url()
    if _is_async(url):
        asyncio.run(_run_async_migrations(url))
        return

    connectable = create_engine(url, poolclass=pool.NullPool)
    try:
        with connectable.connect() as connection:
            _do_run_migrations(connection)
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

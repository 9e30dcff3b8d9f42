"""Alembic environment configuration"""

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel
import asyncio

# Register every table on the shared metadata
import kadi.models  # noqa: F401
from kadi.core.config import get_settings

# this is the Alembic Config object
config = context.config

target_metadata = SQLModel.metadata


def get_url():
    """Database URL from the environment, falling back to alembic.ini"""
    url = get_settings().DATABASE_URL or config.get_main_option("sqlalchemy.url")
    return url.replace("postgresql://", "postgresql+asyncpg://")


def run_migrations_offline():
    """Run migrations in 'offline' mode"""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online():
    """Run migrations in 'online' mode over the async driver"""
    connectable = create_async_engine(get_url(), poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())

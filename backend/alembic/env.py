"""
Alembic Migration Environment
===============================

What:  Configures Alembic to work with our async SQLAlchemy setup.
How:   Takes the connection URL from app.config.settings (same DB_* variables
       as the server) and runs migrations through an async engine.
Who:   Called by `alembic` CLI commands (upgrade, downgrade, revision).

The running server never migrates; it assumes the users table exists.
Only online mode is supported: `--sql` script generation is not.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from app.config import settings
from app.database import Base

# Register models with Base.metadata for --autogenerate
from app.models.user import User  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# '%' must be doubled for ConfigParser interpolation
config.set_main_option("sqlalchemy.url", settings.sqlalchemy_url.replace("%", "%%"))


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Connect with an unpooled async engine and apply pending migrations."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    raise RuntimeError("Offline (--sql) migrations are not supported; run against a database")

run_migrations_online()

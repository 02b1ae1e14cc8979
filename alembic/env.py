"""
Alembic environment configuration.

This file contains the configuration for Alembic migrations,
including database connection and metadata setup.
"""

import os
import sys
from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

# Add the parent directory to the path so we can import the obsdesk package
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from obsdesk.config import settings

# Import all models to ensure they are registered with Base.metadata
import obsdesk.models  # noqa: F401
from obsdesk.database import Base

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Model metadata for 'autogenerate' support
target_metadata = Base.metadata


def get_sync_url() -> str:
    """
    Database URL for migrations, with async drivers swapped for sync ones.

    Raises:
        RuntimeError: If no database URL is configured
    """
    url = os.getenv('DATABASE_URL') or settings.SQLALCHEMY_DATABASE_URI
    if not url or url == "None":
        raise RuntimeError(
            "No database URL configured. "
            "Set DATABASE_URL or individual Postgres environment variables"
        )

    if url.startswith('postgresql+asyncpg://'):
        url = url.replace('postgresql+asyncpg://', 'postgresql://')
    elif url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://')
    elif url.startswith('sqlite+aiosqlite://'):
        url = url.replace('sqlite+aiosqlite://', 'sqlite://')
    return url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Emits SQL to the script output instead of executing it.
    """
    context.configure(
        url=get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    """Run migrations with a database connection."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    config.set_main_option("sqlalchemy.url", get_sync_url())

    # Use sync engine for migrations
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        do_run_migrations(connection)

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

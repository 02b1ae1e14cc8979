"""
Database configuration and session management.

This module contains SQLAlchemy engine, session configuration,
and database table creation utilities.
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from obsdesk.config import settings

database_url = settings.SQLALCHEMY_DATABASE_URI
if database_url.startswith("postgresql://"):
    database_url = database_url.replace("postgresql://", "postgresql+asyncpg://")

engine_kwargs = {"echo": settings.DEBUG and settings.LOG_LEVEL == "DEBUG", "future": True}
if database_url.startswith("sqlite"):
    # One shared connection so in-process SQLite databases see their own writes
    engine_kwargs["poolclass"] = StaticPool
    engine_kwargs["connect_args"] = {"check_same_thread": False}

# Create async engine
engine = create_async_engine(database_url, **engine_kwargs)

# Create async session factory
async_session = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for all database models
Base = declarative_base()


_models_configured = False


def _configure_models():
    """Import all models to ensure SQLAlchemy mappers are properly configured."""
    global _models_configured
    if _models_configured:
        return
    import obsdesk.models  # noqa: F401
    from sqlalchemy.orm import configure_mappers
    configure_mappers()
    _models_configured = True


async def get_db() -> AsyncSession:
    """
    Dependency function to get database session.

    Yields an async database session and ensures proper cleanup.
    """
    _configure_models()

    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables():
    """
    Create all database tables.

    Used for local SQLite development; production schemas are managed by Alembic.
    """
    _configure_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables():
    """
    Drop all database tables.

    WARNING: This will delete all data. Use with caution.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

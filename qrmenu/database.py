"""
Database Connection Module
Creates the SQLAlchemy async engine and session factory used by the
SQL-backed document store.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from qrmenu.core.config import Settings, get_settings


# Base class for all our models
class Base(DeclarativeBase):
    pass


def create_engine(settings: Optional[Settings] = None) -> AsyncEngine:
    """
    Create an async engine from settings.

    Pool sizing is skipped for SQLite URLs, which use a static pool.
    """
    settings = settings or get_settings()
    options = {"echo": settings.debug}
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,      # Connection pool size
            max_overflow=settings.db_max_overflow,  # Extra connections when pool is full
            pool_pre_ping=True,
        )
    return create_async_engine(settings.database_url, **options)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False  # Objects remain accessible after commit
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    Create all tables in database.
    Called once at application startup.
    """
    # Register models on Base.metadata
    from qrmenu import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

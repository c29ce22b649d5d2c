"""
hacksite – Async SQLAlchemy engine, session factory and declarative base.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from hacksite.config import settings


def _engine_options(url: str) -> dict:
    options = {"echo": settings.DEBUG, "future": True}
    if "postgresql" in url:
        # PgBouncer in transaction mode cannot share prepared statements
        options["connect_args"] = {"statement_cache_size": 0}
    return options


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))


if settings.DATABASE_URL.startswith("sqlite"):

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_fks(dbapi_connection, connection_record):
        # Vote rows rely on ON DELETE CASCADE, which SQLite ignores by default
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


async_session = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for every hacksite table."""
    pass


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Request-scoped session: committed when the handler returns, rolled back if it raises."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

"""Database session configuration"""

import logging
from typing import AsyncGenerator, Optional
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sequence_timer.config import (
    DATABASE_URL,
    MAX_OVERFLOW,
    POOL_RECYCLE,
    POOL_SIZE,
    POOL_TIMEOUT,
)
from sequence_timer.db.base import Base

logger = logging.getLogger(__name__)


def to_async_url(database_url: str) -> str:
    """
    Convert a database URL to its async driver form.

    sqlite:// -> sqlite+aiosqlite://, postgresql:// -> postgresql+psycopg://
    """
    if database_url.startswith("sqlite+aiosqlite://"):
        return database_url
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    if database_url.startswith("postgresql+psycopg://"):
        return database_url
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    if database_url.startswith("postgresql+asyncpg://"):
        # Legacy support: convert asyncpg URLs to psycopg
        return database_url.replace("postgresql+asyncpg://", "postgresql+psycopg://", 1)
    raise ValueError(f"Unsupported database URL format: {database_url}")


def create_db_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create the async engine for the definition store"""
    url = to_async_url(database_url or DATABASE_URL)

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            # One shared connection, otherwise every connection sees its own empty database
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(url, echo=False, **kwargs)

        @event.listens_for(engine.sync_engine, "connect")
        def enable_foreign_keys(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_async_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using them
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        echo=False,  # Set to True to see SQL queries in logs
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create missing tables"""
    # Registers every table on Base.metadata
    import sequence_timer.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI routes.

    Usage:
        @router.get("/example")
        async def example(db: AsyncSession = Depends(get_db)):
            ...
    """
    session_factory: async_sessionmaker = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_pool_stats(engine: AsyncEngine) -> dict:
    """
    Get current connection pool statistics.

    Returns:
        Dictionary with pool statistics:
        - size: Total pool size
        - checked_in: Connections currently checked in (available)
        - checked_out: Connections currently checked out (in use)
        - overflow: Overflow connections
    """
    # For async engines, access the underlying sync pool
    sync_pool = engine.sync_engine.pool

    def read(name: str) -> int:
        value = getattr(sync_pool, name, None)
        try:
            return int(value()) if callable(value) else 0
        except (TypeError, ValueError):
            return 0

    return {
        "pool": type(sync_pool).__name__,
        "size": read("size"),
        "checked_in": read("checkedin"),
        "checked_out": read("checkedout"),
        "overflow": max(0, read("overflow")),
    }

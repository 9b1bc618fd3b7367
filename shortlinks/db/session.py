"""
Database Session Management

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: adapter picked from the DATABASE_URL dialect
- Engine and session factory are built by the app factory and stored on
  app.state, so tests and alternate deployments can point at their own store
- Async session management: commit on success, rollback on exceptions
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortlinks.db import models  # noqa: F401  (registers tables on SQLModel.metadata)
from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.server_adapter import ServerDatabaseAdapter
from shortlinks.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Returns:
        SQLiteAdapter for sqlite URLs, ServerDatabaseAdapter otherwise
    """
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        return SQLiteAdapter()
    return ServerDatabaseAdapter(backend)


def create_engine_for_url(database_url: str) -> AsyncEngine:
    return get_database_adapter(database_url).create_engine(database_url)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory bound to an engine.
    """
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    Verify the store is reachable and create missing tables.

    Any failure propagates: the application must not start without its store.
    """
    async with engine.begin() as connection:
        await connection.execute(text("SELECT 1"))
        await connection.run_sync(SQLModel.metadata.create_all)
    logger.info("Store ready (%s)", engine.url.render_as_string(hide_password=True))


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session from the app's session factory
    - Yields it to the endpoint
    - Automatically commits on success
    - Rolls back on exception

    Usage in FastAPI:
        @router.get("/endpoint")
        async def endpoint(session: AsyncSession = Depends(get_session)):
            pass
    """
    session_maker = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

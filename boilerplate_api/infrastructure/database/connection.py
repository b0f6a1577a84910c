"""Database connection and session management.

A ``Database`` is constructed explicitly (normally once per application by
``create_app``) and reached by request handlers through ``app.state``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from boilerplate_api.config import Settings


class Database:
    """Async engine plus session factory sharing one bounded connection pool."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Create the engine described by the settings (no connection is opened)."""
        url = settings.sqlalchemy_url
        engine_kwargs: dict[str, Any] = {"echo": settings.debug}

        # SQLite picks its own pool class, which rejects pool sizing arguments
        if make_url(url).get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=settings.db_pool_timeout,
                pool_pre_ping=True,
            )

        return cls(create_async_engine(url, **engine_kwargs))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session as context manager."""
        async with self.session_factory() as session:
            try:
                yield session
                # Handlers may already have committed or rolled back
                if session.in_transaction():
                    await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Check that a connection can be checked out and used."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    async def dispose(self) -> None:
        """Close pooled connections (call on shutdown)."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the application's database."""
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, Any]:
    """FastAPI dependency for database sessions.

    Declare it with ``Depends(get_db, scope="function")`` so the commit runs
    before the response is sent and a failed commit becomes the response.
    """
    async with get_database(request).session() as session:
        yield session

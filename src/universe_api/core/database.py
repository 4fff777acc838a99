"""
Database Configuration

Declarative base shared by every model, plus the engine and session
factory builders. The application factory builds one engine from its
Settings and keeps it on ``app.state``; nothing here holds a global
connection pool.
"""

import logging
from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from universe_api.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the async engine for ``settings.database_url``."""
    return create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency yielding a database session per request.

    Sessions come from the factory the application was built with.
    Uncommitted work is rolled back if the request fails.
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def check_db(session: AsyncSession) -> bool:
    """Run a trivial query to confirm the store is reachable."""
    result = await session.execute(text("SELECT 1"))
    return result.scalar() == 1


async def init_db(session_maker: async_sessionmaker[AsyncSession]) -> None:
    """
    Verify database connectivity on startup.

    Schema creation is handled by Alembic migrations.
    """
    async with session_maker() as session:
        await check_db(session)


async def close_db(engine: AsyncEngine) -> None:
    """Dispose of the connection pool."""
    await engine.dispose()

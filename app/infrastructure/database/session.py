# app/infrastructure/database/session.py

import logging
from functools import lru_cache
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from app.config.settings import get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class DatabaseNotConfiguredError(RuntimeError):
    """Raised when a database operation is attempted without DATABASE_URL."""


@lru_cache
def get_engine() -> AsyncEngine:
    """Shared connection pool; built on first use so the app can start without a database."""
    settings = get_settings()
    if not settings.database_url:
        raise DatabaseNotConfiguredError("DATABASE_URL is not configured")
    return create_async_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )


@lru_cache
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=get_engine(),
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


async def get_db() -> AsyncIterator[AsyncSession]:
    async with get_sessionmaker()() as session:
        yield session


async def probe_db() -> bool:
    """True when SELECT 1 succeeds. Any failure, including no configuration, is False."""
    try:
        async with get_engine().connect() as conn:
            result = await conn.execute(text("SELECT 1 AS ok"))
            return result.scalar() == 1
    except Exception as e:
        logger.warning("db_probe_failed", extra={"error": str(e)})
        return False

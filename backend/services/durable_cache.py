"""Durable TTL cache backed by SQLModel and SQLAlchemy's async engine.

Survives process restarts. Expiry is part of every lookup query, so an
expired row is indistinguishable from a missing one.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Callable, Optional

from sqlalchemy import delete, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel, col, select

from models.cache import CacheEntry

logger = logging.getLogger(__name__)


class DurableCache:
    """Append-only key/value store with lazy expiry."""

    def __init__(self, database_url: str, clock: Callable[[], float] = time.time):
        self.database_url = database_url
        self._clock = clock
        self.engine = None
        self.async_session = None

    async def startup(self) -> None:
        """Create the engine and the cache table if needed."""
        logging.getLogger("aiosqlite").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

        self.engine = create_async_engine(self.database_url, future=True)
        self.async_session = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Durable cache initialized at %s", self.database_url)

    async def shutdown(self) -> None:
        if self.engine:
            await self.engine.dispose()
            logger.info("Durable cache connections closed")

    @asynccontextmanager
    async def get_session(self):
        if not self.async_session:
            raise RuntimeError("Durable cache not initialized")

        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def find_by_key(self, key: str) -> Optional[CacheEntry]:
        """Newest live entry for `key`, or None."""
        async with self.get_session() as session:
            stmt = (
                select(CacheEntry)
                .where(CacheEntry.key == key, CacheEntry.expires_at > self._clock())
                .order_by(col(CacheEntry.id).desc())
                .limit(1)
            )
            result = await session.execute(stmt)
            return result.scalars().first()

    async def save(self, entry: CacheEntry) -> None:
        async with self.get_session() as session:
            session.add(entry)
            await session.commit()

    async def purge_expired(self) -> int:
        """Delete expired rows. Returns count deleted."""
        async with self.get_session() as session:
            stmt = delete(CacheEntry).where(col(CacheEntry.expires_at) <= self._clock())
            result = await session.execute(stmt)
            await session.commit()
            count = result.rowcount or 0
            if count:
                logger.info("Purged %d expired cache entries", count)
            return count

    async def ping(self) -> bool:
        async with self.get_session() as session:
            await session.execute(text("SELECT 1"))
        return True

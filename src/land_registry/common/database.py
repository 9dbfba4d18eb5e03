"""Async database manager for the land registry."""

import asyncio
from contextlib import asynccontextmanager, nullcontext
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from land_registry.common.config import RegistrySettings, get_settings
from land_registry.common.models import Base

# Import all model modules so Base.metadata is complete for create_all().
import land_registry.users.models  # noqa: F401
import land_registry.lands.models  # noqa: F401
import land_registry.transactions.models  # noqa: F401
import land_registry.verification.models  # noqa: F401


class DatabaseManager:
    """Manages a single async database engine.

    Each ``get_session()`` block is one unit of work: it commits when the
    block exits cleanly and rolls back every write when it raises. SQLite has
    no row locks, so on SQLite the units of work are serialized by a single
    writer lock.
    """

    def __init__(self, settings: RegistrySettings | None = None):
        self._settings = settings or get_settings()
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._writer_lock = asyncio.Lock() if self._settings.is_sqlite else None

    async def init(self) -> None:
        url = self._settings.db_url
        database = make_url(url).database
        if self._settings.is_sqlite and database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_async_engine(url, echo=False)
        self._session_factory = async_sessionmaker(
            self.engine, expire_on_commit=False
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager not initialized — call init() first")
        async with self._writer_lock or nullcontext():
            async with self._session_factory() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise

    async def create_all(self) -> None:
        if self.engine is None:
            raise RuntimeError("DatabaseManager not initialized — call init() first")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self._session_factory = None

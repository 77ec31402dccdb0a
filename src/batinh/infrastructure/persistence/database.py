"""SQLite engine and session management."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# Registers the table models on SQLModel.metadata
from batinh.infrastructure.persistence import models as _models  # noqa: F401

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class DatabaseManager:
    """Owns the aiosqlite engine for the analysis store and response cache.

    The engine is built on first use. Repositories receive get_session as
    their session factory.
    """

    def __init__(self, database_path: str) -> None:
        """Initialize.

        Args:
            database_path: SQLite file path, or ":memory:" for an in-memory DB.
        """
        self._database_path = database_path
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_memory(self) -> bool:
        return self._database_path == MEMORY_DATABASE

    @property
    def url(self) -> str:
        """SQLAlchemy URL of the database."""
        return f"sqlite+aiosqlite:///{self._database_path}"

    def get_engine(self) -> AsyncEngine:
        """Return the engine, creating it (and the file's directory) on first use."""
        if self._engine is None:
            if not self.is_memory:
                Path(self._database_path).parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_async_engine(self.url)
            self._sessions = async_sessionmaker(
                self._engine, class_=AsyncSession, expire_on_commit=False
            )
            logger.debug("Opened database %s", self._database_path)
        return self._engine

    async def create_tables(self) -> None:
        """Create missing tables. Existing tables are left untouched."""
        async with self.get_engine().begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[AsyncSession]:
        self.get_engine()
        assert self._sessions is not None
        async with self._sessions() as session:
            yield session

    async def close(self) -> None:
        """Dispose of the engine. The next call reopens it."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.debug("Closed database %s", self._database_path)

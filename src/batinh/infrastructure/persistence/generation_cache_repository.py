"""SQLite implementation of GenerationCacheRepository."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from batinh.domain.entities import GenerationCacheEntry
from batinh.infrastructure.persistence.datetime_utils import normalize_to_utc
from batinh.infrastructure.persistence.models import GenerationCacheModel


class SQLiteGenerationCacheRepository:
    """SQLite GenerationCacheRepository.

    Keeps at most max_entries rows; the oldest rows are deleted first.
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
        max_entries: int = 100,
    ) -> None:
        """Initialize.

        Args:
            session_factory: Async session factory.
            max_entries: Maximum number of cached responses.
        """
        self._session_factory = session_factory
        self._max_entries = max_entries

    async def get(self, key: str) -> GenerationCacheEntry | None:
        async with self._session_factory() as session:
            model = await self._find_model_by_key(session, key)
            if model is None:
                return None
            return self._to_entity(model)

    async def put(self, entry: GenerationCacheEntry) -> None:
        async with self._session_factory() as session:
            existing = await self._find_model_by_key(session, entry.key)
            if existing:
                existing.response = entry.response
                existing.created_at = entry.created_at
                session.add(existing)
            else:
                session.add(self._to_model(entry))
            await session.commit()

            await self._evict_oldest(session)

    async def delete(self, key: str) -> None:
        async with self._session_factory() as session:
            model = await self._find_model_by_key(session, key)
            if model:
                await session.delete(model)
                await session.commit()

    async def _evict_oldest(self, session: AsyncSession) -> None:
        count_result = await session.exec(
            select(func.count()).select_from(GenerationCacheModel)
        )
        overflow = count_result.one() - self._max_entries
        if overflow <= 0:
            return
        statement = (
            select(GenerationCacheModel)
            .order_by(
                GenerationCacheModel.created_at,  # type: ignore[arg-type]
                GenerationCacheModel.id,  # type: ignore[arg-type]
            )
            .limit(overflow)
        )
        result = await session.exec(statement)
        for model in result.all():
            await session.delete(model)
        await session.commit()

    async def _find_model_by_key(
        self, session: AsyncSession, key: str
    ) -> GenerationCacheModel | None:
        statement = select(GenerationCacheModel).where(
            GenerationCacheModel.cache_key == key
        )
        result = await session.exec(statement)
        return result.first()

    def _to_entity(self, model: GenerationCacheModel) -> GenerationCacheEntry:
        return GenerationCacheEntry(
            key=model.cache_key,
            response=model.response,
            created_at=normalize_to_utc(model.created_at),
        )

    def _to_model(self, entity: GenerationCacheEntry) -> GenerationCacheModel:
        return GenerationCacheModel(
            cache_key=entity.key,
            response=entity.response,
            created_at=entity.created_at,
        )

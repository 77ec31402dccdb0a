"""SQLite implementation of AnalysisRepository."""

import json
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from batinh.domain.entities import AnalysisRecord, AnalysisResult
from batinh.infrastructure.persistence.datetime_utils import normalize_to_utc
from batinh.infrastructure.persistence.exceptions import DatabaseError
from batinh.infrastructure.persistence.models import AnalysisModel

logger = logging.getLogger(__name__)


class SQLiteAnalysisRepository:
    """SQLite AnalysisRepository.

    Analyses are stored as JSON; every save adds a row so history is kept.
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        """Initialize.

        Args:
            session_factory: Async session factory.
            clock: Current time source for created_at.
        """
        self._session_factory = session_factory
        self._clock = clock

    async def save(
        self,
        caller_id: str,
        phone_number: str,
        analysis: AnalysisResult,
        narrative: str | None = None,
    ) -> None:
        async with self._session_factory() as session:
            session.add(
                AnalysisModel(
                    caller_id=caller_id,
                    phone_number=phone_number,
                    result_json=json.dumps(analysis.to_dict(), ensure_ascii=False),
                    narrative=narrative,
                    created_at=self._clock(),
                )
            )
            await session.commit()
        logger.debug("Saved analysis of %s for %s", phone_number, caller_id)

    async def find_latest(
        self,
        caller_id: str,
        phone_number: str | None = None,
    ) -> AnalysisRecord | None:
        async with self._session_factory() as session:
            statement = select(AnalysisModel).where(
                AnalysisModel.caller_id == caller_id
            )
            if phone_number is not None:
                statement = statement.where(AnalysisModel.phone_number == phone_number)
            statement = statement.order_by(
                AnalysisModel.created_at.desc(),  # type: ignore[union-attr]
                AnalysisModel.id.desc(),  # type: ignore[union-attr]
            )
            result = await session.exec(statement)
            model = result.first()
            if model is None:
                return None
            return self._to_entity(model)

    def _to_entity(self, model: AnalysisModel) -> AnalysisRecord:
        """Convert a row to an AnalysisRecord.

        Raises:
            DatabaseError: result_json cannot be decoded.
        """
        try:
            analysis = AnalysisResult.from_dict(json.loads(model.result_json))
        except (ValueError, KeyError, TypeError) as e:
            raise DatabaseError(
                f"Corrupt analysis row {model.id} for {model.phone_number}"
            ) from e
        return AnalysisRecord(
            caller_id=model.caller_id,
            phone_number=model.phone_number,
            analysis=analysis,
            created_at=normalize_to_utc(model.created_at),
            narrative=model.narrative,
        )

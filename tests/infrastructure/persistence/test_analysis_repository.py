"""Tests for SQLiteAnalysisRepository."""

from datetime import datetime, timedelta

import pytest

from batinh.domain.services import PhoneNumberAnalyzer
from batinh.infrastructure.persistence import (
    AnalysisModel,
    DatabaseError,
    DatabaseManager,
    SQLiteAnalysisRepository,
)


class Clock:
    """Adjustable clock."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current


@pytest.fixture
async def db_manager() -> DatabaseManager:
    """Create an in-memory database manager."""
    manager = DatabaseManager(":memory:")
    await manager.create_tables()
    return manager


@pytest.fixture
def clock(now: datetime) -> Clock:
    """Create an adjustable clock."""
    return Clock(now)


@pytest.fixture
def repository(db_manager: DatabaseManager, clock: Clock) -> SQLiteAnalysisRepository:
    """Create a repository instance."""
    return SQLiteAnalysisRepository(db_manager.get_session, clock=clock)


class TestSQLiteAnalysisRepository:
    """SQLiteAnalysisRepository tests."""

    async def test_save_and_find(
        self,
        repository: SQLiteAnalysisRepository,
        analyzer: PhoneNumberAnalyzer,
        now: datetime,
    ) -> None:
        """A saved analysis is restored intact."""
        analysis = analyzer.analyze("0912345678")

        await repository.save("c1", "0912345678", analysis, "Lời bình")

        record = await repository.find_latest("c1", "0912345678")
        assert record is not None
        assert record.caller_id == "c1"
        assert record.phone_number == "0912345678"
        assert record.analysis == analysis
        assert record.narrative == "Lời bình"
        assert record.created_at == now

    async def test_not_found(self, repository: SQLiteAnalysisRepository) -> None:
        """Unknown callers and numbers return None."""
        assert await repository.find_latest("nobody") is None
        assert await repository.find_latest("nobody", "0912345678") is None

    async def test_find_latest_across_numbers(
        self,
        repository: SQLiteAnalysisRepository,
        analyzer: PhoneNumberAnalyzer,
        clock: Clock,
    ) -> None:
        """Without a number, the caller's most recent analysis is returned."""
        await repository.save("c1", "0912345678", analyzer.analyze("0912345678"))
        clock.current += timedelta(minutes=5)
        await repository.save("c1", "0987654321", analyzer.analyze("0987654321"))

        record = await repository.find_latest("c1")

        assert record is not None
        assert record.phone_number == "0987654321"

    async def test_find_latest_for_number(
        self,
        repository: SQLiteAnalysisRepository,
        analyzer: PhoneNumberAnalyzer,
        clock: Clock,
    ) -> None:
        """The latest row for the number wins; history is kept."""
        analysis = analyzer.analyze("0912345678")
        await repository.save("c1", "0912345678", analysis, "cũ")
        clock.current += timedelta(minutes=5)
        await repository.save("c1", "0912345678", analysis, "mới")
        await repository.save("c1", "0987654321", analyzer.analyze("0987654321"))

        record = await repository.find_latest("c1", "0912345678")

        assert record is not None
        assert record.narrative == "mới"

    async def test_callers_isolated(
        self,
        repository: SQLiteAnalysisRepository,
        analyzer: PhoneNumberAnalyzer,
    ) -> None:
        """Analyses belong to their caller."""
        await repository.save("c1", "0912345678", analyzer.analyze("0912345678"))

        assert await repository.find_latest("c2") is None

    async def test_corrupt_row(
        self,
        repository: SQLiteAnalysisRepository,
        db_manager: DatabaseManager,
        now: datetime,
    ) -> None:
        """Rows that cannot be decoded raise DatabaseError."""
        async with db_manager.get_session() as session:
            session.add(
                AnalysisModel(
                    caller_id="c1",
                    phone_number="0912345678",
                    result_json="{not json",
                    created_at=now,
                )
            )
            await session.commit()

        with pytest.raises(DatabaseError):
            await repository.find_latest("c1")

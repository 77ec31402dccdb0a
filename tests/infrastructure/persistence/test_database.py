"""Tests for DatabaseManager."""

from pathlib import Path

from sqlalchemy import inspect

from batinh.infrastructure.persistence import DatabaseManager


class TestDatabaseManager:
    """DatabaseManager tests."""

    def test_get_engine_creates_parent_directory(self, tmp_path: Path) -> None:
        """The parent directory of a file database is created."""
        db_path = tmp_path / "subdir" / "nested" / "batinh.db"
        manager = DatabaseManager(str(db_path))

        engine = manager.get_engine()

        assert "sqlite" in str(engine.url)
        assert db_path.parent.exists()

    async def test_create_tables(self, tmp_path: Path) -> None:
        """Tables are created, and creating them twice is harmless."""
        manager = DatabaseManager(str(tmp_path / "batinh.db"))
        await manager.create_tables()
        await manager.create_tables()

        engine = manager.get_engine()
        async with engine.connect() as conn:
            tables = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )

        assert "analyses" in tables
        assert "generation_caches" in tables
        await manager.close()

    async def test_close_resets_engine(self) -> None:
        """A closed manager creates a new engine on next use."""
        manager = DatabaseManager(":memory:")
        first = manager.get_engine()

        await manager.close()

        assert manager.get_engine() is not first
        await manager.close()

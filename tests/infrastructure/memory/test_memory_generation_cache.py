"""Tests for InMemoryGenerationCache."""

from datetime import datetime

import pytest

from batinh.domain.entities import GenerationCacheEntry
from batinh.infrastructure.memory import InMemoryGenerationCache


def entry(key: str, now: datetime, response: str = "r") -> GenerationCacheEntry:
    return GenerationCacheEntry(key=key, response=response, created_at=now)


class TestInMemoryGenerationCache:
    """InMemoryGenerationCache tests."""

    async def test_put_and_get(self, now: datetime) -> None:
        """Stored entries are returned."""
        cache = InMemoryGenerationCache()
        await cache.put(entry("a", now))

        assert await cache.get("a") == entry("a", now)
        assert await cache.get("missing") is None

    async def test_oldest_evicted(self, now: datetime) -> None:
        """Beyond max_entries the oldest entry is dropped."""
        cache = InMemoryGenerationCache(max_entries=2)
        await cache.put(entry("a", now))
        await cache.put(entry("b", now))
        await cache.put(entry("c", now))

        assert await cache.get("a") is None
        assert await cache.get("b") is not None
        assert await cache.get("c") is not None
        assert len(cache) == 2

    async def test_replace_refreshes_position(self, now: datetime) -> None:
        """Replacing an entry makes it the newest."""
        cache = InMemoryGenerationCache(max_entries=2)
        await cache.put(entry("a", now))
        await cache.put(entry("b", now))
        await cache.put(entry("a", now, response="new"))
        await cache.put(entry("c", now))

        assert await cache.get("b") is None
        cached = await cache.get("a")
        assert cached is not None
        assert cached.response == "new"

    async def test_delete(self, now: datetime) -> None:
        """Deleted entries are gone; deleting twice is harmless."""
        cache = InMemoryGenerationCache()
        await cache.put(entry("a", now))

        await cache.delete("a")
        await cache.delete("a")

        assert await cache.get("a") is None

    def test_invalid_max_entries(self) -> None:
        """max_entries must be positive."""
        with pytest.raises(ValueError):
            InMemoryGenerationCache(max_entries=0)

"""Generation cache repository protocol."""

from typing import Protocol

from batinh.domain.entities import GenerationCacheEntry


class GenerationCacheRepository(Protocol):
    """Response cache backend.

    Implementations bound their size and evict the oldest entry first.
    TTL checks are done by the caller.
    """

    async def get(self, key: str) -> GenerationCacheEntry | None:
        """Return the entry for key, or None."""
        ...

    async def put(self, entry: GenerationCacheEntry) -> None:
        """Insert or replace an entry, evicting the oldest beyond capacity."""
        ...

    async def delete(self, key: str) -> None:
        """Remove an entry if present."""
        ...

"""In-process generation cache."""

from collections import OrderedDict

from batinh.domain.entities import GenerationCacheEntry


class InMemoryGenerationCache:
    """GenerationCacheRepository backed by an OrderedDict.

    Entries are kept in insertion order; beyond max_entries the oldest
    entry is evicted.
    """

    def __init__(self, max_entries: int = 100) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, GenerationCacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> GenerationCacheEntry | None:
        return self._entries.get(key)

    async def put(self, entry: GenerationCacheEntry) -> None:
        self._entries.pop(entry.key, None)
        self._entries[entry.key] = entry
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

"""Per-caller locks."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class CallerLocks:
    """Registry of one asyncio.Lock per caller.

    Work for the same caller runs one message at a time; different callers
    never wait on each other.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        # Tasks holding or waiting for each lock
        self._users: dict[str, int] = {}

    def get(self, caller_id: str) -> asyncio.Lock:
        """Return the caller's lock, creating it on first use."""
        lock = self._locks.get(caller_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[caller_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, caller_id: str) -> AsyncIterator[None]:
        """Hold the caller's lock for the duration of the block."""
        lock = self.get(caller_id)
        self._users[caller_id] = self._users.get(caller_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._users[caller_id] - 1
            if remaining:
                self._users[caller_id] = remaining
            else:
                del self._users[caller_id]

    def discard(self, caller_id: str) -> None:
        """Forget the caller's lock if no task holds or awaits it."""
        if caller_id in self._locks and caller_id not in self._users:
            del self._locks[caller_id]

    def __len__(self) -> int:
        return len(self._locks)

"""Tests for CallerLocks."""

import asyncio

from batinh.application.services import CallerLocks


class TestCallerLocks:
    """CallerLocks tests."""

    def test_same_lock_per_caller(self) -> None:
        """A caller always gets the same lock."""
        locks = CallerLocks()

        assert locks.get("c1") is locks.get("c1")
        assert locks.get("c1") is not locks.get("c2")
        assert len(locks) == 2

    async def test_same_caller_serialized(self) -> None:
        """Blocks for one caller never overlap."""
        locks = CallerLocks()
        events: list[str] = []

        async def work(tag: str) -> None:
            async with locks.hold("c1"):
                events.append(f"start {tag}")
                await asyncio.sleep(0.01)
                events.append(f"end {tag}")

        await asyncio.gather(work("a"), work("b"))

        assert events == ["start a", "end a", "start b", "end b"]

    async def test_different_callers_concurrent(self) -> None:
        """Different callers do not wait on each other."""
        locks = CallerLocks()
        entered = asyncio.Event()

        async def holder() -> None:
            async with locks.hold("c1"):
                await asyncio.wait_for(entered.wait(), timeout=1)

        async def other() -> None:
            async with locks.hold("c2"):
                entered.set()

        await asyncio.gather(holder(), other())

        assert entered.is_set()

    async def test_discard(self) -> None:
        """Only idle locks are discarded."""
        locks = CallerLocks()
        async with locks.hold("c1"):
            locks.discard("c1")
            assert len(locks) == 1

        locks.discard("c1")
        locks.discard("unknown")

        assert len(locks) == 0

    async def test_discard_keeps_lock_with_waiter(self) -> None:
        """A lock someone is waiting for survives discard."""
        locks = CallerLocks()
        first = locks.get("c1")
        release = asyncio.Event()

        async def holder() -> None:
            async with locks.hold("c1"):
                await release.wait()

        async def waiter() -> None:
            async with locks.hold("c1"):
                pass

        holding = asyncio.create_task(holder())
        await asyncio.sleep(0)
        waiting = asyncio.create_task(waiter())
        await asyncio.sleep(0)

        locks.discard("c1")
        assert locks.get("c1") is first

        release.set()
        await asyncio.gather(holding, waiting)
        locks.discard("c1")

        assert len(locks) == 0

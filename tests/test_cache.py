from __future__ import annotations

import asyncio

import pytest

from movie_feed.infrastructure import AsyncTtlCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire():
    clock = FakeClock()
    cache: AsyncTtlCache[str, int] = AsyncTtlCache(10, clock=clock)
    calls: list[int] = []

    async def loader() -> int:
        calls.append(1)
        return len(calls)

    async def scenario():
        first = await cache.get_or_load("key", loader)
        clock.now = 9.9
        cached = await cache.get_or_load("key", loader)
        clock.now = 10.0
        refreshed = await cache.get_or_load("key", loader)
        return first, cached, refreshed

    assert asyncio.run(scenario()) == (1, 1, 2)
    assert len(cache) == 1


def test_failures_are_not_stored():
    cache: AsyncTtlCache[str, int] = AsyncTtlCache(60)

    async def failing() -> int:
        raise RuntimeError("boom")

    async def succeeding() -> int:
        return 5

    async def scenario():
        with pytest.raises(RuntimeError):
            await cache.get_or_load("key", failing)
        assert len(cache) == 0
        first = await cache.get_or_load("key", succeeding)
        again = await cache.get_or_load("key", failing)
        return first, again

    assert asyncio.run(scenario()) == (5, 5)
    assert len(cache) == 1


def test_invalidate_and_clear():
    cache: AsyncTtlCache[int, str] = AsyncTtlCache(60)
    loads: list[int] = []

    async def loader() -> str:
        loads.append(1)
        return f"value-{len(loads)}"

    async def scenario():
        await cache.get_or_load(1, loader)
        await cache.get_or_load(2, loader)
        cache.invalidate(1)
        return await cache.get_or_load(1, loader), await cache.get_or_load(2, loader)

    assert asyncio.run(scenario()) == ("value-3", "value-2")
    cache.clear()
    assert len(cache) == 0


def test_expired_entries_are_evicted_on_insert():
    clock = FakeClock()
    cache: AsyncTtlCache[str, str] = AsyncTtlCache(1, clock=clock)

    async def loader() -> str:
        return "v"

    async def scenario():
        await cache.get_or_load("old", loader)
        clock.now = 5
        await cache.get_or_load("new", loader)

    asyncio.run(scenario())
    assert len(cache) == 1

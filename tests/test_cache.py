"""Tests for the snapshot cache."""

import asyncio

import pytest

from qrmenu.services.cache import SnapshotCache


class CountingLoader:
    def __init__(self, delay: float = 0.0):
        self.calls = 0
        self.delay = delay

    async def __call__(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return {"call": self.calls}


class TestSnapshotCache:
    """Tests for SnapshotCache."""

    @pytest.mark.asyncio
    async def test_same_object_within_ttl(self, clock):
        cache = SnapshotCache(ttl_seconds=1.0, clock=clock)
        loader = CountingLoader()

        first = await cache.get(loader)
        clock.advance(0.5)
        second = await cache.get(loader)

        assert first is second
        assert loader.calls == 1

    @pytest.mark.asyncio
    async def test_reload_after_ttl(self, clock):
        cache = SnapshotCache(ttl_seconds=1.0, clock=clock)
        loader = CountingLoader()

        first = await cache.get(loader)
        clock.advance(1.0)
        second = await cache.get(loader)

        assert first is not second
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self, clock):
        cache = SnapshotCache(ttl_seconds=1.0, clock=clock)
        loader = CountingLoader()

        await cache.get(loader)
        cache.invalidate()

        assert cache.peek() is None
        await cache.get(loader)
        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_load_racing_an_invalidation_is_not_stored(self, clock):
        cache = SnapshotCache(ttl_seconds=1.0, clock=clock)

        async def loader_with_concurrent_write():
            cache.invalidate()
            return {"stale": True}

        value = await cache.get(loader_with_concurrent_write)

        assert value == {"stale": True}
        assert cache.peek() is None

    @pytest.mark.asyncio
    async def test_concurrent_misses_without_single_flight(self, clock):
        cache = SnapshotCache(ttl_seconds=1.0, clock=clock)
        loader = CountingLoader(delay=0.01)

        await asyncio.gather(cache.get(loader), cache.get(loader))

        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_single_flight_shares_one_load(self, clock):
        cache = SnapshotCache(ttl_seconds=1.0, clock=clock, single_flight=True)
        loader = CountingLoader(delay=0.01)

        first, second = await asyncio.gather(cache.get(loader), cache.get(loader))

        assert loader.calls == 1
        assert first is second

import asyncio

import pytest

from models.cache import CacheEntry
from services.durable_cache import DurableCache


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}"


def run_with_store(database_url, clock, scenario):
    async def _run():
        store = DurableCache(database_url, clock=clock)
        await store.startup()
        try:
            return await scenario(store)
        finally:
            await store.shutdown()

    return asyncio.run(_run())


def test_round_trip_before_expiry(database_url, clock):
    async def scenario(store):
        await store.save(CacheEntry.build("/politicians/jane-doe/", {"name": "Jane Doe"}, clock.now + 60))
        entry = await store.find_by_key("/politicians/jane-doe/")
        return entry.payload

    assert run_with_store(database_url, clock, scenario) == {"name": "Jane Doe"}


def test_expired_row_is_a_miss(database_url, clock):
    async def scenario(store):
        await store.save(CacheEntry.build("k", {"a": 1}, clock.now + 60))
        clock.advance(60)
        return await store.find_by_key("k")

    assert run_with_store(database_url, clock, scenario) is None


def test_newest_live_row_wins(database_url, clock):
    async def scenario(store):
        await store.save(CacheEntry.build("k", {"version": 1}, clock.now + 10))
        await store.save(CacheEntry.build("k", {"version": 2}, clock.now + 600))
        first = await store.find_by_key("k")
        clock.advance(30)
        second = await store.find_by_key("k")
        return first.payload, second.payload

    assert run_with_store(database_url, clock, scenario) == ({"version": 2}, {"version": 2})


def test_survives_restart(database_url, clock):
    async def write(store):
        await store.save(CacheEntry.build("k", [1, 2, 3], clock.now + 60))

    async def read(store):
        entry = await store.find_by_key("k")
        return entry.payload

    run_with_store(database_url, clock, write)
    assert run_with_store(database_url, clock, read) == [1, 2, 3]


def test_purge_expired(database_url, clock):
    async def scenario(store):
        await store.save(CacheEntry.build("stale", {}, clock.now + 5))
        await store.save(CacheEntry.build("fresh", {}, clock.now + 500))
        clock.advance(10)
        purged = await store.purge_expired()
        return purged, await store.find_by_key("fresh")

    purged, fresh = run_with_store(database_url, clock, scenario)
    assert purged == 1
    assert fresh is not None


def test_requires_startup(database_url, clock):
    store = DurableCache(database_url, clock=clock)
    with pytest.raises(RuntimeError):
        asyncio.run(store.find_by_key("k"))

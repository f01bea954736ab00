from unittest.mock import AsyncMock

import pytest

from tandem_bot.editing.store import (
    SESSION_TTL_SECONDS,
    MemorySessionStore,
    RedisSessionStore,
    make_session_key,
)


def test_session_key_includes_workflow_and_user():
    assert make_session_key("availability", 7) == "availability_edit_session:7"
    assert make_session_key("interests", 7) != make_session_key("languages", 7)


def test_default_ttl_is_thirty_minutes():
    assert SESSION_TTL_SECONDS == 30 * 60


@pytest.mark.asyncio
async def test_memory_store_round_trip(store):
    await store.set("k", "v", 60)
    assert await store.get("k") == "v"

    await store.delete("k")
    assert await store.get("k") is None


@pytest.mark.asyncio
async def test_memory_store_expires_entries(store, clock):
    await store.set("k", "v", 60)

    clock.advance(59)
    assert await store.get("k") == "v"

    clock.advance(1)
    assert await store.get("k") is None
    assert len(store) == 0


@pytest.mark.asyncio
async def test_memory_store_overwrite_resets_ttl(store, clock):
    await store.set("k", "old", 60)
    clock.advance(50)
    await store.set("k", "new", 60)
    clock.advance(50)

    assert await store.get("k") == "new"


@pytest.mark.asyncio
async def test_abandoned_entries_are_evicted_on_write(store, clock):
    for index in range(1000):
        await store.set(f"abandoned:{index}", "v", 60)

    clock.advance(3600)
    await store.set("fresh", "v", 60)

    assert len(store) == 1
    assert await store.get("fresh") == "v"


@pytest.mark.asyncio
async def test_deleting_missing_key_is_silent(store):
    await store.delete("missing")


@pytest.mark.asyncio
async def test_redis_store_uses_setex():
    client = AsyncMock()
    client.get.return_value = "payload"
    redis_store = RedisSessionStore(client)

    await redis_store.set("k", "payload", 1800)
    value = await redis_store.get("k")
    await redis_store.delete("k")
    await redis_store.ping()
    await redis_store.close()

    client.setex.assert_awaited_once_with("k", 1800, "payload")
    assert value == "payload"
    client.delete.assert_awaited_once_with("k")
    client.ping.assert_awaited_once()
    client.aclose.assert_awaited_once()

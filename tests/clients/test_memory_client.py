"""Tests for the in-memory cache client."""

import asyncio
from collections.abc import AsyncGenerator
from unittest.mock import patch

import pytest

from inkwell.clients.memory_client import MemoryClient


@pytest.fixture
async def memory_client() -> AsyncGenerator[MemoryClient]:
    client = MemoryClient()
    yield client
    await client.close()


@pytest.mark.asyncio
async def test_set_and_get(memory_client: MemoryClient) -> None:
    await memory_client.set("key", "value")
    assert await memory_client.get("key") == "value"


@pytest.mark.asyncio
async def test_get_missing(memory_client: MemoryClient) -> None:
    assert await memory_client.get("missing") is None


@pytest.mark.asyncio
async def test_delete_counts_removed_keys(memory_client: MemoryClient) -> None:
    await memory_client.set("a", "1")
    await memory_client.set("b", "2")

    assert await memory_client.delete("a", "b", "c") == 2
    assert await memory_client.get("a") is None


@pytest.mark.asyncio
async def test_expired_entry_is_dropped_on_read(memory_client: MemoryClient) -> None:
    with patch("inkwell.clients.memory_client.monotonic", return_value=1000.0):
        await memory_client.set("visitor", "1", ex=60)

    with patch("inkwell.clients.memory_client.monotonic", return_value=1059.0):
        assert await memory_client.get("visitor") == "1"

    with patch("inkwell.clients.memory_client.monotonic", return_value=1061.0):
        assert await memory_client.get("visitor") is None
    assert (await memory_client.info())["total_keys"] == 0


@pytest.mark.asyncio
async def test_sweep_removes_expired_entries() -> None:
    client = MemoryClient(sweep_interval=1)
    await client.start_lifecycle()
    await client.set("short", "1", ex=1)
    await client.set("long", "2")

    await asyncio.sleep(2.1)

    info = await client.info()
    await client.close()
    assert info["total_keys"] == 1


@pytest.mark.asyncio
async def test_scan_iter_matches_pattern_and_skips_expired(memory_client: MemoryClient) -> None:
    with patch("inkwell.clients.memory_client.monotonic", return_value=1000.0):
        await memory_client.set("online:10.0.0.1", "1", ex=60)
        await memory_client.set("online:10.0.0.2", "1", ex=10)
        await memory_client.set("stat:statistic", "{}")

    with patch("inkwell.clients.memory_client.monotonic", return_value=1030.0):
        keys = [key async for key in memory_client.scan_iter("online:*")]

    assert keys == ["online:10.0.0.1"]


@pytest.mark.asyncio
async def test_lru_eviction() -> None:
    client = MemoryClient(max_entries=3)

    await client.set("key1", "value1")
    await client.set("key2", "value2")
    await client.set("key3", "value3")
    # reading key1 makes key2 the oldest
    await client.get("key1")
    await client.set("key4", "value4")

    assert await client.get("key2") is None
    assert await client.get("key1") == "value1"
    assert await client.get("key4") == "value4"


@pytest.mark.asyncio
async def test_ping_and_info(memory_client: MemoryClient) -> None:
    assert await memory_client.ping() is True

    info = await memory_client.info()

    assert info["server"] == "In-Memory Cache"
    assert info["max_entries"] == MemoryClient.DEFAULT_MAX_ENTRIES


@pytest.mark.asyncio
async def test_close_stops_sweep() -> None:
    client = MemoryClient()
    await client.start_lifecycle()

    await client.close()

    assert await client.ping() is False


@pytest.mark.asyncio
async def test_eviction_prefers_expiring_entries() -> None:
    client = MemoryClient(max_entries=3)

    await client.set("stat:statistic", "{}")
    await client.set("repo:a", "1", ex=60)
    await client.set("repo:b", "2", ex=60)
    await client.set("repo:c", "3", ex=60)

    assert await client.get("stat:statistic") == "{}"
    assert await client.get("repo:a") is None
    assert await client.get("repo:c") == "3"


@pytest.mark.asyncio
async def test_eviction_falls_back_to_oldest_when_nothing_expires() -> None:
    client = MemoryClient(max_entries=2)

    await client.set("first", "1")
    await client.set("second", "2")
    await client.set("third", "3")

    assert await client.get("first") is None
    assert await client.get("third") == "3"

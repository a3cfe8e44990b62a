"""Tests for inkwell/clients/redis_client.py and the retry decorator."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from inkwell.clients.redis_client import RedisClient
from inkwell.decorators import with_retry
from inkwell.decorators.with_retry import RETRIABLE_EXCEPTIONS, _log_before_sleep


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_retries_until_success(self) -> None:
        calls = 0

        @with_retry(max_retries=3, base_delay=0, max_delay=0)
        async def flaky() -> str:
            nonlocal calls
            calls += 1
            if calls < 3:
                mssg = "down"
                raise RedisConnectionError(mssg)
            return "ok"

        assert await flaky() == "ok"
        assert calls == 3

    @pytest.mark.asyncio
    async def test_reraises_after_last_attempt(self) -> None:
        @with_retry(max_retries=2, base_delay=0, max_delay=0)
        async def broken() -> None:
            mssg = "timeout"
            raise TimeoutError(mssg)

        with pytest.raises(TimeoutError):
            await broken()

    @pytest.mark.asyncio
    async def test_other_exceptions_are_not_retried(self) -> None:
        calls = 0

        @with_retry(max_retries=3, base_delay=0, max_delay=0)
        async def wrong() -> None:
            nonlocal calls
            calls += 1
            mssg = "bad value"
            raise ValueError(mssg)

        with pytest.raises(ValueError, match="bad value"):
            await wrong()
        assert calls == 1

    def test_before_sleep_tolerates_missing_state(self) -> None:
        retry_state = MagicMock()
        retry_state.outcome = None
        retry_state.next_action = None
        retry_state.fn = None

        _log_before_sleep(3)(retry_state)

    def test_retriable_exceptions(self) -> None:
        assert RedisConnectionError in RETRIABLE_EXCEPTIONS
        assert TimeoutError in RETRIABLE_EXCEPTIONS


class TestRedisClient:
    def test_client_requires_connect(self) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            _ = RedisClient().client

    @pytest.mark.asyncio
    @patch("inkwell.clients.redis_client.ConnectionPool")
    @patch("inkwell.clients.redis_client.Redis")
    async def test_connect_success(self, mock_redis: MagicMock, mock_pool: MagicMock) -> None:
        instance = MagicMock()
        instance.ping = AsyncMock(return_value=True)
        mock_redis.return_value = instance

        client = RedisClient({"host": "localhost", "port": 6379})
        await client.connect()

        mock_pool.assert_called_once_with(host="localhost", port=6379)
        assert client.client is instance

    @pytest.mark.asyncio
    @patch("inkwell.clients.redis_client.ConnectionPool")
    @patch("inkwell.clients.redis_client.Redis")
    async def test_connect_ping_fails(self, mock_redis: MagicMock, mock_pool: MagicMock) -> None:
        instance = MagicMock()
        instance.ping = AsyncMock(return_value=False)
        mock_redis.return_value = instance

        with pytest.raises(RedisConnectionError, match="Cannot connect to Redis"):
            await RedisClient({"host": "cache", "port": 6380}).connect()

    @pytest.mark.asyncio
    async def test_disconnect_when_not_connected(self) -> None:
        await RedisClient().disconnect()

    @pytest.mark.asyncio
    async def test_delete_without_keys(self) -> None:
        client = RedisClient()
        client._redis = AsyncMock()

        assert await client.delete() == 0
        client._redis.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_scan_iter_follows_cursor_and_decodes(self) -> None:
        client = RedisClient()
        client._redis = MagicMock()
        client._redis.scan = AsyncMock(
            side_effect=[(7, [b"online:a"]), (0, [b"online:b", "online:c"])],
        )

        keys = [key async for key in client.scan_iter("online:*", count=10)]

        assert keys == ["online:a", "online:b", "online:c"]
        assert client._redis.scan.await_count == 2

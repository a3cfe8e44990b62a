"""Protocol shared by the Redis and in-memory cache clients."""

from collections.abc import AsyncIterator, Awaitable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheClientProtocol(Protocol):
    """
    Key/value interface the cache manager talks to.

    ``RedisClient`` and ``MemoryClient`` both satisfy it, which lets the
    manager swap to memory when Redis is down without the callers noticing.
    """

    def get(self, key: str) -> Awaitable[str | None]: ...

    def set(self, key: str, value: str, ex: int | None = None) -> Awaitable[bool]: ...

    def delete(self, *keys: str) -> Awaitable[int]: ...

    def scan_iter(self, pattern: str, count: int = 100) -> AsyncIterator[str]: ...

    def ping(self) -> Awaitable[bool]: ...

    def info(self) -> Awaitable[dict[str, Any]]: ...

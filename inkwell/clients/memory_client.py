"""In-memory cache client used when Redis is disabled or unreachable."""

from asyncio import CancelledError, Lock, Task, create_task
from asyncio import sleep as asyncio_sleep
from collections import OrderedDict
from collections.abc import AsyncGenerator
from contextlib import suppress
from fnmatch import fnmatch
from time import monotonic

from inkwell.monitoring import get_logger

logger = get_logger(__name__)


class MemoryClient:
    """
    Async in-memory key/value store that answers like ``RedisClient``.

    Entries are kept in LRU order and capped at ``max_entries``; expired
    entries are dropped lazily on read and by a periodic sweep. When full,
    the least recently used entry with an expiry is evicted first, so
    entries stored without one outlive cached query results.
    """

    DEFAULT_MAX_ENTRIES: int = 100_000
    DEFAULT_SWEEP_INTERVAL: int = 60  # seconds

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        sweep_interval: int = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        self._entries: OrderedDict[str, tuple[str, float | None]] = OrderedDict()
        self._max_entries = max_entries
        self._sweep_interval = sweep_interval
        self._sweep_task: Task[None] | None = None
        self._lock = Lock()
        self.is_connected: bool = True

    async def start_lifecycle(self) -> None:
        """Start the background expiry sweep."""
        async with self._lock:
            if self._sweep_task is None:
                self.is_connected = True
                self._sweep_task = create_task(self._sweep_loop())
                logger.info("MemoryClient expiry sweep started")

    async def _sweep_loop(self) -> None:
        while self.is_connected:
            try:
                await asyncio_sleep(self._sweep_interval)
                async with self._lock:
                    expired = [k for k in self._entries if self._expired(k)]
                    for key in expired:
                        del self._entries[key]
                if expired:
                    logger.debug("Memory sweep removed expired keys", count=len(expired))
            except CancelledError:
                break
            except Exception:
                logger.exception("Error in memory sweep loop")

    def _expired(self, key: str) -> bool:
        """Caller holds the lock."""
        expires_at = self._entries[key][1]
        return expires_at is not None and monotonic() > expires_at

    def _live(self, key: str) -> bool:
        """Drop ``key`` if it has expired; caller holds the lock."""
        if key not in self._entries:
            return False
        if self._expired(key):
            del self._entries[key]
            return False
        return True

    def _evict_one(self) -> None:
        """Drop the oldest expiring entry, or the oldest one; caller holds the lock."""
        for key, (_, expires_at) in self._entries.items():
            if expires_at is not None:
                del self._entries[key]
                return
        self._entries.popitem(last=False)

    async def get(self, key: str) -> str | None:
        async with self._lock:
            if not self._live(key):
                return None
            self._entries.move_to_end(key)
            return self._entries[key][0]

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        async with self._lock:
            if key not in self._entries:
                while len(self._entries) >= self._max_entries:
                    self._evict_one()
            expires_at = monotonic() + ex if ex else None
            self._entries[key] = (value, expires_at)
            self._entries.move_to_end(key)
            return True

    async def delete(self, *keys: str) -> int:
        async with self._lock:
            removed = 0
            for key in keys:
                if self._entries.pop(key, None) is not None:
                    removed += 1
            return removed

    async def scan_iter(
        self,
        pattern: str,
        count: int = 100,  # noqa: ARG002 - same signature as RedisClient
    ) -> AsyncGenerator[str]:
        """Yield live keys matching a glob pattern."""
        async with self._lock:
            keys = [k for k in list(self._entries) if self._live(k)]

        for key in keys:
            if fnmatch(key, pattern):
                yield key

    async def ping(self) -> bool:
        return self.is_connected

    async def info(self) -> dict[str, str | int]:
        async with self._lock:
            return {
                "server": "In-Memory Cache",
                "total_keys": len(self._entries),
                "max_entries": self._max_entries,
            }

    async def close(self) -> None:
        """Stop the sweep task."""
        async with self._lock:
            self.is_connected = False
            task, self._sweep_task = self._sweep_task, None
        if task is not None:
            task.cancel()
            with suppress(CancelledError):
                await task

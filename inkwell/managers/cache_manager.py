"""Cache manager over Redis with an automatic in-memory fallback."""

from typing import Any

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from inkwell.clients.memory_client import MemoryClient
from inkwell.clients.protocols import CacheClientProtocol
from inkwell.clients.redis_client import RedisClient
from inkwell.configs import CacheConfig, settings
from inkwell.errors import BASE_EXCEPTION, CacheExceptionError, CacheKeyError
from inkwell.monitoring import get_logger
from inkwell.utils.cache_serializer import deserialize, serialize

logger = get_logger(__name__)


class CacheManager:
    """
    Namespaced JSON cache.

    Uses Redis when ``REDIS_ENABLED`` is set and reachable, otherwise the
    in-memory client. A Redis failure at runtime switches to memory for the
    rest of the process.
    """

    def __init__(
        self,
        redis_client: RedisClient | None = None,
        memory_client: MemoryClient | None = None,
    ) -> None:
        self.redis_client = redis_client or RedisClient()
        self.memory_client = memory_client or MemoryClient()
        self._client: CacheClientProtocol = self.memory_client
        self.is_redis_available = False
        self.cache_config = CacheConfig()

    async def initialize(self) -> None:
        """Connect to Redis, or fall back to the in-memory client."""
        if settings.REDIS_ENABLED:
            try:
                await self.redis_client.connect()
                self._client = self.redis_client
                self.is_redis_available = True
                logger.info("Cache manager initialized", backend="redis")
                return
            except RedisConnectionError as e:
                logger.warning(f"Redis connection failed: {e}. Falling back to in-memory cache.")
        else:
            logger.info("Redis disabled. Using in-memory cache.")

        self._client = self.memory_client
        self.is_redis_available = False
        await self.memory_client.start_lifecycle()
        logger.info("Cache manager initialized", backend="in-memory")

    async def shutdown(self) -> None:
        if self.is_redis_available:
            await self.redis_client.disconnect()
        await self.memory_client.close()
        logger.info("Cache manager shutdown successfully.")

    def _build_key(self, key: str, namespace: str | None = None) -> str:
        prefix = self.cache_config.key_prefix
        return f"{prefix}:{namespace}:{key}" if namespace else f"{prefix}:{key}"

    async def _fallback_to_memory(self) -> None:
        if self.is_redis_available:
            logger.warning("Redis connection lost. Falling back to in-memory cache.")
            self._client = self.memory_client
            self.is_redis_available = False
            await self.memory_client.start_lifecycle()

    async def get(self, key: str, namespace: str | None = None) -> Any:
        """
        Get a cached value.

        Returns:
            The decoded value, or None on a miss.

        Raises:
            CacheKeyError: If the backend fails.
        """
        full_key = self._build_key(key, namespace)
        try:
            cached = await self._client.get(full_key)
        except RedisError:
            await self._fallback_to_memory()
            return None
        except BASE_EXCEPTION as e:
            logger.exception("Cache get failed", key=full_key)
            mssg = f"Cache get failed for key {key}"
            raise CacheKeyError(mssg) from e
        if cached is None:
            return None
        return deserialize(cached)

    async def set(
        self,
        key: str,
        value: object,
        ttl: int | None = None,
        namespace: str | None = None,
        *,
        persist: bool = False,
    ) -> bool:
        """
        Store a value. ``ttl`` is clamped to ``max_ttl``.

        A ``persist`` entry has no expiry and ``ttl`` is ignored. The in-memory
        client evicts it only when every other entry is persistent too; on
        Redis it depends on the server eviction policy (``volatile-lru`` or
        ``noeviction`` keep it).

        Raises:
            CacheKeyError: If the backend fails.
        """
        full_key = self._build_key(key, namespace)
        ex = None
        if not persist:
            ex = min(ttl if ttl is not None else self.cache_config.default_ttl, self.cache_config.max_ttl)
        payload = serialize(value)
        try:
            return await self._client.set(full_key, payload, ex=ex)
        except RedisError:
            await self._fallback_to_memory()
            return await self._client.set(full_key, payload, ex=ex)
        except BASE_EXCEPTION as e:
            logger.exception("Cache set failed", key=full_key)
            mssg = f"Cache set failed for key {key}"
            raise CacheKeyError(mssg) from e

    async def delete(self, *keys: str, namespace: str | None = None) -> int:
        full_keys = [self._build_key(key, namespace) for key in keys]
        try:
            return await self._client.delete(*full_keys)
        except RedisError:
            await self._fallback_to_memory()
            return await self._client.delete(*full_keys)

    async def clear(self, namespace: str | None = None) -> int:
        """
        Delete every key under ``namespace`` (or under the prefix).

        Returns:
            Number of keys deleted.
        """
        prefix = self.cache_config.key_prefix
        pattern = f"{prefix}:{namespace}:*" if namespace else f"{prefix}:*"
        try:
            deleted = 0
            batch: list[str] = []
            async for key in self._client.scan_iter(pattern):
                batch.append(key)
                if len(batch) >= 1000:
                    deleted += await self._client.delete(*batch)
                    batch = []
            if batch:
                deleted += await self._client.delete(*batch)
        except RedisError:
            await self._fallback_to_memory()
            return await self.clear(namespace)
        if deleted:
            logger.debug("Cleared cache keys", pattern=pattern, count=deleted)
        return deleted

    async def count(self, namespace: str) -> int:
        """Number of live keys under ``namespace``."""
        pattern = f"{self.cache_config.key_prefix}:{namespace}:*"
        try:
            return sum([1 async for _ in self._client.scan_iter(pattern)])
        except RedisError:
            await self._fallback_to_memory()
            return await self.count(namespace)

    async def health_check(self) -> dict[str, Any]:
        """Report backend and reachability."""
        result: dict[str, Any] = {"backend": "redis" if self.is_redis_available else "in-memory"}
        try:
            result["status"] = "healthy" if await self._client.ping() else "unhealthy"
            result["info"] = await self._client.info() if not self.is_redis_available else {}
        except (RedisError, CacheExceptionError, *BASE_EXCEPTION) as e:
            result["status"] = "unhealthy"
            result["error"] = str(e)
        return result

"""
Redis Cache implementation.

Cache-Aside storage for provisioned filter catalogs, with TTL jitter.
"""
import random
from typing import Optional

import msgpack
import redis.asyncio as aioredis
from redis.asyncio import Redis

from internal.domain.filters import FilterContext, FilterDefinition
from pkg.logger.logger import get_logger


logger = get_logger(__name__)


# Default TTL in seconds (5 minutes)
DEFAULT_TTL = 300
# Maximum jitter in seconds (1 minute)
MAX_JITTER = 60


class RedisCache:
    """
    Redis cache with msgpack payloads.

    Cache failures are logged and reported as misses; the cache never
    fails a search.
    """

    def __init__(
        self,
        redis_url: str,
        default_ttl: int = DEFAULT_TTL,
        max_jitter: int = MAX_JITTER,
    ) -> None:
        """
        Initialize the Redis cache.

        Args:
            redis_url: Redis connection URL.
            default_ttl: Default TTL in seconds.
            max_jitter: Maximum jitter added to TTL.
        """
        self._redis_url = redis_url
        self._default_ttl = default_ttl
        self._max_jitter = max_jitter
        self._redis: Optional[Redis] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        self._redis = await aioredis.from_url(
            self._redis_url,
            decode_responses=False,
        )
        await self._redis.ping()
        logger.info("Connected to Redis", url=self._redis_url)

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    def _ttl(self, ttl: Optional[int] = None) -> int:
        # Jitter spreads expiry of catalogs written together
        return (ttl or self._default_ttl) + random.randint(0, self._max_jitter)

    async def get(self, key: str) -> Optional[dict]:
        """
        Get a value from cache.

        Args:
            key: Cache key.

        Returns:
            Cached dict, or None on miss or error.
        """
        if not self._redis:
            return None

        try:
            data = await self._redis.get(key)
            if data is None:
                logger.debug("Cache miss", key=key)
                return None

            value = msgpack.unpackb(data, raw=False)
        except Exception as e:
            logger.error("Cache get error", key=key, error=str(e))
            return None

        logger.debug("Cache hit", key=key)
        return value

    async def set(self, key: str, value: dict, ttl: Optional[int] = None) -> bool:
        """
        Set a value with TTL.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Base TTL in seconds.

        Returns:
            True if stored.
        """
        if not self._redis:
            return False

        try:
            data = msgpack.packb(value, use_bin_type=True, default=str)
            await self._redis.setex(key, self._ttl(ttl), data)
            return True
        except Exception as e:
            logger.error("Cache set error", key=key, error=str(e))
            return False

    async def invalidate_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a pattern.

        Args:
            pattern: Redis glob pattern.

        Returns:
            Number of keys deleted.
        """
        if not self._redis:
            return 0

        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern)]
            if not keys:
                return 0
            deleted = await self._redis.delete(*keys)
            logger.info("Cache pattern invalidated", pattern=pattern, deleted=deleted)
            return deleted
        except Exception as e:
            logger.error("Cache pattern invalidate error", pattern=pattern, error=str(e))
            return 0


class FilterCatalogCache:
    """Caches provisioned filter catalogs per filter context."""

    def __init__(self, cache: RedisCache, ttl: Optional[int] = None) -> None:
        """
        Initialize the filter catalog cache.

        Args:
            cache: RedisCache instance.
            ttl: Base TTL in seconds.
        """
        self._cache = cache
        self._ttl = ttl

    async def get_filters(self, context: FilterContext) -> Optional[list[FilterDefinition]]:
        """Get a cached filter catalog, or None."""
        payload = await self._cache.get(context.cache_key)
        if payload is None:
            return None
        return [FilterDefinition.from_dict(d) for d in payload.get("filters", [])]

    async def set_filters(
        self,
        context: FilterContext,
        filters: list[FilterDefinition],
    ) -> bool:
        """Cache a filter catalog."""
        return await self._cache.set(
            context.cache_key,
            {"filters": [f.to_dict() for f in filters]},
            ttl=self._ttl,
        )

    async def invalidate_store(self, store_id: str) -> int:
        """Drop every cached catalog of a store."""
        return await self._cache.invalidate_pattern(f"search:filters:{store_id}:*")

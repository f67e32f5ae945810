"""
Redis read cache for event listings and event detail.

Values are stored as JSON. Cache failures are logged and reported as a
miss; the database stays the source of truth.
"""
import json
from typing import Optional, Any
from redis import asyncio as aioredis
from redis.exceptions import RedisError
from app.core.config import settings
from app.core.logging import logger


class RedisCache:
    """Redis cache client with connection pooling."""
    
    def __init__(self, url: Optional[str] = None):
        self._url = url or settings.REDIS_URL
        self._client: Optional[aioredis.Redis] = None
    
    def _get_client(self) -> aioredis.Redis:
        """Get or create the Redis client backed by a connection pool."""
        if self._client is None:
            self._client = aioredis.from_url(
                self._url,
                decode_responses=True,
                max_connections=20,
                socket_connect_timeout=1,
            )
            logger.info("Redis connection pool created")
        return self._client
    
    async def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache by key.
        
        Returns:
            Cached value or None if missing or the cache is unreachable
        """
        try:
            value = await self._get_client().get(key)
        except (RedisError, OSError) as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None
        if value is None:
            return None
        return json.loads(value)
    
    async def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        """
        Store a JSON-serializable value with a TTL (seconds).
        
        Returns:
            True if stored, False otherwise
        """
        try:
            serialized = json.dumps(value, default=str)
            await self._get_client().setex(key, expire or settings.CACHE_TTL_SECONDS, serialized)
            return True
        except (RedisError, OSError) as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False
    
    async def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching pattern (e.g. 'events:detail:*').
        
        Returns:
            Number of keys deleted
        """
        try:
            client = self._get_client()
            keys = [key async for key in client.scan_iter(match=pattern)]
            if keys:
                return await client.delete(*keys)
            return 0
        except (RedisError, OSError) as e:
            logger.error(f"Redis DELETE_PATTERN error for pattern {pattern}: {e}")
            return 0
    
    async def invalidate_events(self) -> None:
        """Drop every cached event read after a write."""
        await self.delete_pattern("events:*")
    
    async def close(self) -> None:
        """Close the Redis connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis connection pool closed")


# Create a single instance to be imported throughout the app
cache = RedisCache()

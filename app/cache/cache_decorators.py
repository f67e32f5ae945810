"""
Cache decorator for read-only repository functions.
"""
import hashlib
import json
from functools import wraps
from typing import Callable, Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.cache.redis_client import cache
from app.core.logging import logger


def cached(key_prefix: str, expire: Optional[int] = None):
    """
    Cache the JSON-serializable result of an async function.
    
    Args:
        key_prefix: Prefix for the cache key, e.g. 'events:list'
        expire: TTL in seconds (defaults to CACHE_TTL_SECONDS)
        
    Usage:
        @cached('events:list')
        async def list_event_cards(db):
            ...
    
    ``None`` results are not cached so a later write is visible immediately.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            cache_key = f"{key_prefix}:{_generate_key_from_args(args, kwargs)}"
            
            cached_value = await cache.get(cache_key)
            if cached_value is not None:
                logger.debug(f"Cache hit for key: {cache_key}")
                return cached_value
            
            logger.debug(f"Cache miss for key: {cache_key}")
            result = await func(*args, **kwargs)
            if result is not None:
                await cache.set(cache_key, result, expire)
            return result
        return wrapper
    return decorator


def _generate_key_from_args(args: tuple, kwargs: dict) -> str:
    """
    Build a stable MD5 key from call arguments, ignoring database sessions.
    """
    key_data = {
        'args': [str(arg) for arg in args if not isinstance(arg, AsyncSession)],
        'kwargs': {k: str(v) for k, v in kwargs.items() if not isinstance(v, AsyncSession)},
    }
    key_string = json.dumps(key_data, sort_keys=True)
    return hashlib.md5(key_string.encode()).hexdigest()

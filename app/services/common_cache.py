"""
Shared JSON cache over Redis
Used by the admin discount listings; the storefront pricing path never reads it
"""

import json
import logging
from typing import Optional, Any
import redis.asyncio as redis

from app.core.redis import get_redis_client

logger = logging.getLogger(__name__)


class SimpleCache:
    """Key-prefixed JSON cache

    Every Redis failure is logged and reported as a miss, so an unavailable
    cache slows the admin screens down but never breaks them.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, key_prefix: str = ""):
        self._redis_client = redis_client
        self.key_prefix = key_prefix

    @property
    def redis_client(self) -> Optional[redis.Redis]:
        # fall back to the application pool opened in the lifespan hook
        return self._redis_client or get_redis_client()

    def _get_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}" if self.key_prefix else key

    async def get(self, key: str) -> Optional[Any]:
        client = self.redis_client
        if client is None:
            return None
        try:
            data = await client.get(self._get_key(key))
            if data:
                return json.loads(data)
            return None
        except Exception as e:
            logger.error(f"Cache read failed {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        client = self.redis_client
        if client is None:
            return False
        try:
            data = json.dumps(value, default=str, ensure_ascii=False)
            await client.setex(self._get_key(key), ttl, data)
            return True
        except Exception as e:
            logger.error(f"Cache write failed {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        client = self.redis_client
        if client is None:
            return False
        try:
            return await client.delete(self._get_key(key)) > 0
        except Exception as e:
            logger.error(f"Cache delete failed {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern"""
        client = self.redis_client
        if client is None:
            return 0
        try:
            keys = [key async for key in client.scan_iter(match=self._get_key(pattern))]
            if keys:
                return await client.delete(*keys)
            return 0
        except Exception as e:
            logger.error(f"Cache pattern delete failed {pattern}: {e}")
            return 0


discount_cache = SimpleCache(key_prefix="discount:")

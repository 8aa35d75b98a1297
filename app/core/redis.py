import redis.asyncio as aioredis
from typing import Optional
from app.core.config import settings
import structlog

"Redis connection manager shared by the cache layer and health checks"

logger = structlog.get_logger()


class RedisManager:
    """Owns the process-wide Redis connection pool"""

    def __init__(self):
        self.redis_pool: Optional[aioredis.Redis] = None

    async def init_redis(self) -> None:
        try:
            self.redis_pool = aioredis.from_url(
                settings.redis_url_computed,
                encoding="utf-8",
                decode_responses=True,
                max_connections=20,
                retry_on_timeout=True
            )
            await self.redis_pool.ping()
            logger.info("redis pool initialized", url=settings.redis_url_computed)
        except Exception as e:
            logger.error("redis pool initialization failed", error=str(e))
            # no client means the cache layer reports misses
            if self.redis_pool is not None:
                await self.redis_pool.aclose()
                self.redis_pool = None
            raise

    async def close_redis(self) -> None:
        if self.redis_pool:
            await self.redis_pool.aclose()
            self.redis_pool = None
            logger.info("redis pool closed")

    async def ping(self) -> bool:
        """True when the pool exists and answers PING"""
        if not self.redis_pool:
            return False
        try:
            return bool(await self.redis_pool.ping())
        except Exception as e:
            logger.warning("redis ping failed", error=str(e))
            return False


redis_manager = RedisManager()


def get_redis_client() -> Optional[aioredis.Redis]:
    return redis_manager.redis_pool

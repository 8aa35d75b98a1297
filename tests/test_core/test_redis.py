"""
Redis connection manager tests
"""

from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core import redis as redis_module
from app.core.redis import RedisManager
from app.services.common_cache import SimpleCache


@pytest.mark.asyncio
class TestRedisManager:

    @pytest.fixture
    def manager(self, monkeypatch):
        manager = RedisManager()
        monkeypatch.setattr(redis_module, "redis_manager", manager)
        return manager

    async def test_failed_init_leaves_no_client(self, manager):
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("connection refused")

        with patch("app.core.redis.aioredis.from_url", return_value=client):
            with pytest.raises(RedisConnectionError):
                await manager.init_redis()

        assert manager.redis_pool is None
        assert redis_module.get_redis_client() is None
        assert SimpleCache(key_prefix="discount:").redis_client is None
        client.aclose.assert_called_once()

    async def test_cache_misses_without_client(self, manager):
        cache = SimpleCache(key_prefix="discount:")

        assert await cache.get("active:all") is None
        assert await cache.set("active:all", []) is False
        assert await cache.delete_pattern("active:*") == 0

    async def test_successful_init(self, manager):
        client = AsyncMock()
        client.ping.return_value = True

        with patch("app.core.redis.aioredis.from_url", return_value=client):
            await manager.init_redis()

        assert redis_module.get_redis_client() is client
        assert await manager.ping() is True

        await manager.close_redis()
        assert manager.redis_pool is None

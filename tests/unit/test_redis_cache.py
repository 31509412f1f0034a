"""Tests for CacheService with a mocked redis.asyncio client."""

import json
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from app.infrastructure.cache.redis_cache import CacheService


@pytest.fixture
def redis_client() -> AsyncMock:
    return AsyncMock()


async def test_get_deserializes_json(settings, redis_client) -> None:
    redis_client.get.return_value = json.dumps({"mob": "13800138000"})
    cache = CacheService(settings, redis_client)
    assert await cache.get("k") == {"mob": "13800138000"}


async def test_get_missing_and_invalid_json_are_misses(settings, redis_client) -> None:
    cache = CacheService(settings, redis_client)
    redis_client.get.return_value = None
    assert await cache.get("k") is None
    redis_client.get.return_value = "{not json"
    assert await cache.get("k") is None


async def test_set_uses_ttl(settings, redis_client) -> None:
    cache = CacheService(settings, redis_client)
    assert await cache.set("k", {"a": 1}, 600) is True
    redis_client.setex.assert_awaited_once_with("k", 600, json.dumps({"a": 1}))


async def test_set_rejects_non_positive_ttl(settings, redis_client) -> None:
    with pytest.raises(ValueError):
        await CacheService(settings, redis_client).set("k", 1, 0)


async def test_errors_degrade(settings, redis_client) -> None:
    redis_client.get.side_effect = redis.ResponseError("WRONGTYPE")
    redis_client.setex.side_effect = redis.ResponseError("OOM")
    cache = CacheService(settings, redis_client)
    assert await cache.get("k") is None
    assert await cache.set("k", 1, 60) is False


async def test_unavailable_service_is_noop(settings) -> None:
    cache = CacheService(settings)
    assert cache.is_available() is False
    assert await cache.get("k") is None
    assert await cache.set("k", 1, 60) is False


async def test_connection_loss_without_reconnect_returns_default(
    settings, redis_client, monkeypatch
) -> None:
    redis_client.get.side_effect = redis.ConnectionError("gone")
    cache = CacheService(settings, redis_client)

    async def failed_connect() -> None:
        cache.redis = None
        cache._connected = False

    monkeypatch.setattr(cache, "connect", failed_connect)
    assert await cache.get("k") is None
    assert cache.is_available() is False


async def test_disconnect_closes_client(settings, redis_client) -> None:
    cache = CacheService(settings, redis_client)
    await cache.disconnect()
    redis_client.aclose.assert_awaited_once()
    assert cache.is_available() is False

"""Redis-based cache service: the Secret Store for SMS challenges and cached queries.

Provides async Redis get and set-with-TTL with JSON values. Errors never
propagate to callers: reads degrade to a miss (None), writes report False and
are logged, so callers decide whether a failed write matters.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from app.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheService:
    """Async Redis cache service with TTL support.

    Call connect() at startup and disconnect() at shutdown. When Redis is
    disabled or unreachable the service stays unavailable: get() returns
    None and set() returns False.
    """

    def __init__(
        self, settings: Settings, redis_client: redis.Redis | None = None
    ) -> None:
        """Initialize cache service.

        Args:
            settings: Application settings (connection parameters).
            redis_client: Optional Redis client for testing or DI; treated as connected.
        """
        self.settings = settings
        self.redis = redis_client
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=self.settings.redis_password.get_secret_value()
                if self.settings.redis_password
                else None,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    async def _reconnect(self) -> bool:
        """Attempt to reconnect after a dropped connection. Returns True if reconnected."""
        if self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except redis.RedisError:
            logger.debug("Ignoring error while closing stale Redis connection")
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _execute(
        self,
        op: str,
        key: str,
        command: Callable[[redis.Redis], Awaitable[T]],
        default: T,
    ) -> T:
        """Run a command, retrying once after reconnect on connection loss."""
        if not self.is_available() or self.redis is None:
            return default
        try:
            return await command(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect() and self.redis is not None:
                try:
                    return await command(self.redis)
                except redis.RedisError:
                    logger.exception("Cache %s error for key %s after reconnect", op, key)
                    return default
            logger.warning("Cache %s unavailable for key %s (Redis disconnected)", op, key)
            return default
        except redis.RedisError:
            logger.exception("Cache %s error for key %s", op, key)
            return default

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable.

        Args:
            key: Cache key (use app.infrastructure.cache.keys builders).

        Returns:
            Cached value or None.
        """

        async def _get(client: redis.Redis) -> Any | None:
            raw = await client.get(key)
            if raw is None:
                logger.debug("Cache MISS: %s", key)
                return None
            logger.debug("Cache HIT: %s", key)
            try:
                return json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Cache value for %s is not valid JSON; treating as miss", key)
                return None

        return await self._execute("get", key, _get, None)

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store value with TTL. Returns True on success.

        Args:
            key: Cache key.
            value: Value to cache (JSON-serializable).
            ttl: Time-to-live in seconds (must be positive).

        Returns:
            True if stored, False otherwise.
        """
        if ttl <= 0:
            raise ValueError("ttl must be a positive number of seconds")
        serialized = json.dumps(value)

        async def _set(client: redis.Redis) -> bool:
            await client.setex(key, ttl, serialized)
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
            return True

        return await self._execute("set", key, _set, False)

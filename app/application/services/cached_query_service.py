"""Cache-aside query service: serve from cache, compute and populate on miss."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from app.application.interfaces.services import ICacheService
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class CachedQueryService:
    """Read-through cache over an async compute function.

    Cached payloads have the shape {"query": label, "data": result}. A hit
    returns the stored payload unchanged. Cache failures never fail the
    request: read errors count as a miss, write failures are logged and
    counted in cache_write_failures.
    """

    def __init__(self, cache: ICacheService) -> None:
        self._cache = cache
        self.cache_write_failures = 0

    async def _read(self, key: str) -> Any | None:
        try:
            return await self._cache.get(key)
        except Exception:
            logger.warning("Cache read failed for %s; computing", key, exc_info=True)
            return None

    async def get(
        self,
        key: str,
        label: str,
        compute: Callable[[], Awaitable[Any]],
        ttl: int,
    ) -> dict[str, Any]:
        """Return the cached payload for key, computing and storing it on a miss.

        Args:
            key: Canonical cache key (see app.infrastructure.cache.keys).
            label: Human-readable query label stored with the result.
            compute: Coroutine factory producing JSON-serializable data.
            ttl: Seconds the populated entry lives.
        """
        cached = await self._read(key)
        if cached is not None:
            return cached

        data = await compute()
        payload = {"query": label, "data": data}
        try:
            stored = await self._cache.set(key, payload, ttl)
        except Exception:
            logger.warning("Cache write raised for %s", key, exc_info=True)
            stored = False
        if not stored:
            self.cache_write_failures += 1
            logger.warning(
                "Cache write failed for %s (failures=%d)", key, self.cache_write_failures
            )
        return payload

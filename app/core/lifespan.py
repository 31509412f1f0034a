"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring: logging, the shared HTTP client,
cache, provider clients, telemetry and DB engine dispose. No business logic.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from app.application.services.cached_query_service import CachedQueryService
from app.core.config import get_settings
from app.infrastructure.cache.redis_cache import CacheService
from app.infrastructure.external.sms import create_sms_sender
from app.infrastructure.external.wechat import WeChatOAuthClient
from app.infrastructure.persistence.database import dispose_engine, get_engine
from app.shared.telemetry.logging import setup_logging
from app.shared.telemetry.telemetry import Telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, shared HTTP client, cache (connected only when
    Redis is enabled), WeChat and SMS clients, telemetry. Shutdown order:
    HTTP client close, cache disconnect, telemetry shutdown, SQL engine dispose.
    """
    settings = get_settings()
    setup_logging(settings)

    # ---- Startup ----
    # Shared HTTP client for WeChat calls (connection reuse).
    http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    app.state.http_client = http_client

    cache = CacheService(settings)
    if settings.redis_enabled:
        await cache.connect()
    else:
        logger.warning("Redis disabled: SMS challenges and query caching unavailable")
    app.state.cache = cache
    app.state.query_cache = CachedQueryService(cache)

    app.state.wechat_client = (
        WeChatOAuthClient(settings, http_client=http_client)
        if settings.wechat_enabled
        else None
    )
    if app.state.wechat_client is None:
        logger.warning("WX_APP_ID not set: login uses the local fake WeChat endpoint")
    app.state.sms_sender = create_sms_sender(settings)

    app.state.telemetry = None
    if settings.telemetry_enabled:
        telemetry = Telemetry.from_settings(settings)
        if telemetry.start():
            telemetry.instrument(app, engine=get_engine(settings))
            app.state.telemetry = telemetry

    yield

    # ---- Shutdown ----
    await http_client.aclose()
    app.state.http_client = None
    logger.info("HTTP client closed")

    await cache.disconnect()

    if app.state.telemetry is not None:
        app.state.telemetry.shutdown()
        app.state.telemetry = None

    await dispose_engine()

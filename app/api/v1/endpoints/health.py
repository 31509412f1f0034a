"""Health check endpoints for liveness, readiness and cache probes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.dependencies import get_cache, get_query_cache
from app.application.interfaces.services import ICacheService
from app.application.services.cached_query_service import CachedQueryService
from app.core.config import get_settings
from app.infrastructure.persistence.database import get_engine
from app.schemas.health import CacheHealthResponse, HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


async def _database_status() -> str:
    engine = get_engine()
    if engine is None:
        return "not_configured"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        return "error"
    return "ok"


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database or cache not ready", "model": ReadinessResponse}},
)
async def readiness_check(
    cache: Annotated[ICacheService, Depends(get_cache)],
) -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers and the cache is connected; 503 otherwise."""
    database = await _database_status()
    cache_status = "ok" if cache.is_available() else "unavailable"
    ready = database == "ok" and cache_status == "ok"
    body = ReadinessResponse(
        status="ok" if ready else "not_ready", database=database, cache=cache_status
    )
    if ready:
        return body
    return JSONResponse(status_code=503, content=body.model_dump())


@router.get("/cache", response_model=CacheHealthResponse)
def cache_health(
    cache: Annotated[ICacheService, Depends(get_cache)],
    query_cache: Annotated[CachedQueryService, Depends(get_query_cache)],
) -> CacheHealthResponse:
    """Cache connectivity and the count of failed query-cache writes."""
    return CacheHealthResponse(
        available=cache.is_available(),
        cache_write_failures=query_cache.cache_write_failures,
    )

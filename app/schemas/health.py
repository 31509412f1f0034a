"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    version: str | None = None


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready."""

    status: str = Field(default="ok", description="Readiness status")
    database: str = Field(..., description="ok | not_configured | error")
    cache: str = Field(..., description="ok | unavailable")


class CacheHealthResponse(BaseModel):
    """Response for GET /health/cache."""

    available: bool
    cache_write_failures: int = Field(
        ..., description="Query cache writes that failed since process start"
    )

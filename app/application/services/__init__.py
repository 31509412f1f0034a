"""Application services: identity binding and cache-aside queries."""

from app.application.services.cached_query_service import CachedQueryService
from app.application.services.identity_service import (
    FAKE_WECHAT_PATH,
    IdentityService,
    build_login_url,
)

__all__ = [
    "CachedQueryService",
    "FAKE_WECHAT_PATH",
    "IdentityService",
    "build_login_url",
]

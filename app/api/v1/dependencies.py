"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, repositories and application
services. Process-wide collaborators (cache, query cache, HTTP client,
WeChat client, SMS sender) are created in app.core.lifespan and read from
app.state here; routes depend only on these functions.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.services import (
    ICacheService,
    ISmsSender,
    IWeChatOAuthClient,
)
from app.application.services.cached_query_service import CachedQueryService
from app.application.services.identity_service import IdentityService
from app.application.use_cases.reference_data import ReferenceDataService
from app.core.config import Settings, get_settings
from app.domain.exceptions import AuthenticationException
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    GdpRepository,
    InfoRepository,
    UserRepository,
)
from app.infrastructure.security.jwt import TokenIssuer

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_cache(request: Request) -> ICacheService:
    """Secret Store shared by SMS challenges and query results."""
    return request.app.state.cache


def get_query_cache(request: Request) -> CachedQueryService:
    """Process-wide cache-aside service (keeps the write-failure counter)."""
    return request.app.state.query_cache


def get_wechat_client(request: Request) -> IWeChatOAuthClient | None:
    """WeChat OAuth client, or None in development mode (no app id)."""
    return request.app.state.wechat_client


def get_sms_sender(request: Request) -> ISmsSender:
    return request.app.state.sms_sender


def get_token_issuer(settings: SettingsDep) -> TokenIssuer:
    return TokenIssuer(settings)


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    """User repository for read-only use."""
    return UserRepository(db)


async def get_user_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> UserRepository:
    """User repository inside a transaction (commit on success, rollback on error)."""
    return UserRepository(db)


def _identity_service(
    user_repo: UserRepository,
    cache: ICacheService,
    token_issuer: TokenIssuer,
    sms_sender: ISmsSender,
    wechat_client: IWeChatOAuthClient | None,
    settings: Settings,
) -> IdentityService:
    return IdentityService(
        user_repo,
        cache,
        token_issuer,
        sms_sender,
        wechat_client,
        wx_scope=settings.wx_scope,
    )


async def get_identity_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
    cache: Annotated[ICacheService, Depends(get_cache)],
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    sms_sender: Annotated[ISmsSender, Depends(get_sms_sender)],
    wechat_client: Annotated[IWeChatOAuthClient | None, Depends(get_wechat_client)],
    settings: SettingsDep,
) -> IdentityService:
    """Identity service for flows that only read users (login URL, SMS send)."""
    return _identity_service(
        user_repo, cache, token_issuer, sms_sender, wechat_client, settings
    )


async def get_identity_service_for_write(
    user_repo: Annotated[UserRepository, Depends(get_user_repo_for_write)],
    cache: Annotated[ICacheService, Depends(get_cache)],
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    sms_sender: Annotated[ISmsSender, Depends(get_sms_sender)],
    wechat_client: Annotated[IWeChatOAuthClient | None, Depends(get_wechat_client)],
    settings: SettingsDep,
) -> IdentityService:
    """Identity service for flows that create or update users (transactional)."""
    return _identity_service(
        user_repo, cache, token_issuer, sms_sender, wechat_client, settings
    )


async def get_reference_data_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    query_cache: Annotated[CachedQueryService, Depends(get_query_cache)],
    settings: SettingsDep,
) -> ReferenceDataService:
    return ReferenceDataService(
        InfoRepository(db),
        GdpRepository(db),
        query_cache,
        volatile_ttl=settings.cache_ttl_volatile,
        stable_ttl=settings.cache_ttl_stable,
    )


_http_bearer = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> int:
    """Return the user id from a valid Bearer token; raise 401 otherwise."""
    if credentials is None:
        raise AuthenticationException("Not authenticated")
    return token_issuer.verify_token(credentials.credentials).user_id

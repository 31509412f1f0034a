"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions. Infrastructure implements
the interfaces (repositories, cache, WeChat client, SMS sender).
"""

from app.application.interfaces import (
    ICacheService,
    IGdpRepository,
    IInfoRepository,
    ISmsSender,
    ITokenIssuer,
    IUserRepository,
    IWeChatOAuthClient,
)
from app.application.services import CachedQueryService, IdentityService
from app.application.use_cases import ReferenceDataService

__all__ = [
    "CachedQueryService",
    "ICacheService",
    "IGdpRepository",
    "IInfoRepository",
    "ISmsSender",
    "ITokenIssuer",
    "IUserRepository",
    "IWeChatOAuthClient",
    "IdentityService",
    "ReferenceDataService",
]

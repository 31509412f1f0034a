"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IGdpRepository,
    IInfoRepository,
    IUserRepository,
)
from app.application.interfaces.services import (
    ICacheService,
    ISmsSender,
    ITokenIssuer,
    IWeChatOAuthClient,
)

__all__ = [
    "ICacheService",
    "IGdpRepository",
    "IInfoRepository",
    "ISmsSender",
    "ITokenIssuer",
    "IUserRepository",
    "IWeChatOAuthClient",
]

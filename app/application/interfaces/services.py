"""Service interfaces (ports): cache, token issuer, OAuth and SMS providers.

Protocols define contracts for infrastructure implementations (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.auth import WeChatAccessToken


class ICacheService(Protocol):
    """Time-bounded key/value store (Secret Store)."""

    def is_available(self) -> bool:
        """Return True if cache is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None (missing, expired or unavailable)."""

    async def set(self, key: str, value: Any, ttl: int) -> bool:
        """Store value with TTL in seconds. Returns True on success."""


class ITokenIssuer(Protocol):
    """Mints signed, time-bounded access tokens."""

    def issue_token(self, subject_id: int) -> str:
        """Return a signed token whose subject is subject_id."""


class IWeChatOAuthClient(Protocol):
    """WeChat web authorization: authorize URL and code exchange."""

    def build_authorize_url(self, redirect_uri: str) -> str:
        """Return the provider authorize URL embedding redirect_uri."""

    async def exchange_code(self, code: str) -> WeChatAccessToken:
        """Exchange an authorization code; raises UpstreamServiceException on failure."""


class ISmsSender(Protocol):
    """SMS provider: delivers a templated message with parameters."""

    async def send_code(self, mob: str, template_params: list[str]) -> bool:
        """Send template_params to mob. Returns True when the provider accepted it."""

"""DTOs for the identity binding flow (login, SMS challenge, verification)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.application.dtos.user import UserResult
from app.shared.utils.datetime import ensure_utc


@dataclass(frozen=True)
class LoginResult:
    """Result of exchanging an OAuth code: access token plus the bound user."""

    token: str
    user: UserResult


@dataclass(frozen=True)
class WeChatAccessToken:
    """Normalized WeChat web-authorization token response."""

    open_id: str
    access_token: str
    expires_in: int
    refresh_token: str | None = None
    scope: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(frozen=True)
class SmsChallenge:
    """Pending SMS challenge stored in the cache under the user's id."""

    user_id: int
    mob: str
    sms_code: str = field(repr=False)
    created_at: datetime

    def to_cache(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "mob": self.mob,
            "sms_code": self.sms_code,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_cache(cls, data: Any) -> SmsChallenge | None:
        """Rebuild from a cached dict; None when the value is missing or malformed."""
        if not isinstance(data, dict):
            return None
        try:
            created_at = ensure_utc(datetime.fromisoformat(data["created_at"]))
            return cls(
                user_id=int(data["user_id"]),
                mob=str(data["mob"]),
                sms_code=str(data["sms_code"]),
                created_at=created_at,
            )
        except (KeyError, TypeError, ValueError):
            return None

    def matches(self, mob: str, sms_code: str) -> bool:
        """Exact string equality on both phone and code (no normalization)."""
        return self.mob == mob and self.sms_code == sms_code


@dataclass(frozen=True)
class SmsSendResult:
    """Result of issuing an SMS challenge."""

    is_success: bool
    expire_seconds: int


@dataclass(frozen=True)
class VerifyResult:
    """Result of checking an SMS code. False is a normal outcome, not an error."""

    is_success: bool

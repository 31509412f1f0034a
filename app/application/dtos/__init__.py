"""Application DTOs: plain dataclasses passed between layers (no ORM types)."""

from app.application.dtos.auth import (
    LoginResult,
    SmsChallenge,
    SmsSendResult,
    VerifyResult,
    WeChatAccessToken,
)
from app.application.dtos.reference import GdpItem, InfoItem, PagedData
from app.application.dtos.user import UserResult

__all__ = [
    "GdpItem",
    "InfoItem",
    "LoginResult",
    "PagedData",
    "SmsChallenge",
    "SmsSendResult",
    "UserResult",
    "VerifyResult",
    "WeChatAccessToken",
]

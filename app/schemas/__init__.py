"""Pydantic request/response schemas for the API."""

from app.schemas.auth import (
    LoginTokenResponse,
    RegisterRequest,
    RegisterResponse,
    SendSmsCodeRequest,
    SendSmsCodeResponse,
    VerifySmsCodeRequest,
    VerifySmsCodeResponse,
)
from app.schemas.business import GdpResponse, InfoPage, InfoResponse
from app.schemas.health import CacheHealthResponse, HealthResponse, ReadinessResponse
from app.schemas.user import UserResponse

__all__ = [
    "CacheHealthResponse",
    "GdpResponse",
    "HealthResponse",
    "InfoPage",
    "InfoResponse",
    "LoginTokenResponse",
    "ReadinessResponse",
    "RegisterRequest",
    "RegisterResponse",
    "SendSmsCodeRequest",
    "SendSmsCodeResponse",
    "UserResponse",
    "VerifySmsCodeRequest",
    "VerifySmsCodeResponse",
]

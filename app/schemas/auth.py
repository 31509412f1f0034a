"""Auth and registration API schemas."""

from datetime import date

from pydantic import Field

from app.core.constants import (
    ID_CARD_PATTERN,
    MOBILE_PATTERN,
    SMS_CODE_PATTERN,
    SMS_CODE_TTL_SECONDS,
)
from app.schemas.common import CamelModel
from app.schemas.user import UserResponse


class LoginTokenResponse(CamelModel):
    """Response for GET /auth/login/token: access token and the bound user."""

    token: str
    user: UserResponse


class SendSmsCodeRequest(CamelModel):
    """Request body for POST /auth/reg/send-sms-code."""

    mob: str = Field(..., pattern=MOBILE_PATTERN, description="Mainland China mobile number")


class SendSmsCodeResponse(CamelModel):
    is_success: bool
    expire_seconds: int = Field(default=SMS_CODE_TTL_SECONDS)


class VerifySmsCodeRequest(CamelModel):
    """Request body for POST /auth/reg/verify-sms-code."""

    mob: str = Field(..., pattern=MOBILE_PATTERN)
    sms_code: str = Field(..., pattern=SMS_CODE_PATTERN, description="6-digit code")


class VerifySmsCodeResponse(CamelModel):
    is_success: bool


class RegisterRequest(CamelModel):
    """Request body for POST /auth/reg. mob must be the caller's verified phone."""

    mob: str = Field(..., pattern=MOBILE_PATTERN)
    name: str = Field(..., min_length=1, max_length=64)
    id_card_number: str = Field(
        ..., pattern=ID_CARD_PATTERN, description="18-character resident id number"
    )
    birthday: date


class RegisterResponse(CamelModel):
    is_success: bool
    user: UserResponse

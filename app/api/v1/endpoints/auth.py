"""Auth API: WeChat login, SMS phone verification and registration.

Login routes are public; /reg routes require a Bearer token from /login/token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from app.api.v1.dependencies import (
    get_current_user_id,
    get_identity_service,
    get_identity_service_for_write,
    get_wechat_client,
)
from app.application.interfaces.services import IWeChatOAuthClient
from app.application.services.identity_service import IdentityService, build_login_url
from app.core.config import Settings, get_settings
from app.core.limiter import limit_auth, limit_sms_send, limit_writes
from app.schemas.auth import (
    LoginTokenResponse,
    RegisterRequest,
    RegisterResponse,
    SendSmsCodeRequest,
    SendSmsCodeResponse,
    VerifySmsCodeRequest,
    VerifySmsCodeResponse,
)
from app.schemas.user import UserResponse

router = APIRouter()

CurrentUserId = Annotated[int, Depends(get_current_user_id)]


@router.get("/login", status_code=302, response_class=RedirectResponse)
@limit_auth
async def login(
    request: Request,
    redirect_uri: Annotated[str, Query(min_length=1)],
    wechat_client: Annotated[IWeChatOAuthClient | None, Depends(get_wechat_client)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Redirect the browser to WeChat authorization (or the local stand-in)."""
    url = build_login_url(
        redirect_uri, str(request.base_url), wechat_client, settings.wx_scope
    )
    return RedirectResponse(url, status_code=302)


@router.get("/login/fake-wechat", status_code=302, response_class=RedirectResponse)
async def fake_wechat_authorize(
    redirect_uri: Annotated[str, Query(min_length=1)],
    wechat_client: Annotated[IWeChatOAuthClient | None, Depends(get_wechat_client)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Development stand-in for WeChat: bounce straight back with the fixed fake code."""
    if wechat_client is not None:
        raise HTTPException(status_code=404, detail="Not Found")
    sep = "&" if "?" in redirect_uri else "?"
    return RedirectResponse(
        f"{redirect_uri}{sep}code={settings.wx_fake_code}", status_code=302
    )


@router.get("/login/token", response_model=LoginTokenResponse)
@limit_auth
async def login_token(
    request: Request,
    code: Annotated[str, Query(min_length=1, max_length=256)],
    service: Annotated[IdentityService, Depends(get_identity_service_for_write)],
):
    """Exchange the authorization code for an access token and the bound user."""
    result = await service.exchange_code_for_token(code)
    return LoginTokenResponse(
        token=result.token, user=UserResponse.from_result(result.user)
    )


@router.post("/reg/send-sms-code", response_model=SendSmsCodeResponse)
@limit_sms_send
async def send_sms_code(
    request: Request,
    body: SendSmsCodeRequest,
    user_id: CurrentUserId,
    service: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Send a 6-digit verification code to the phone; it is valid for 10 minutes."""
    result = await service.request_phone_verification(user_id, body.mob)
    return SendSmsCodeResponse(
        is_success=result.is_success, expire_seconds=result.expire_seconds
    )


@router.post("/reg/verify-sms-code", response_model=VerifySmsCodeResponse)
@limit_writes
async def verify_sms_code(
    request: Request,
    body: VerifySmsCodeRequest,
    user_id: CurrentUserId,
    service: Annotated[IdentityService, Depends(get_identity_service_for_write)],
):
    """Check the code; on success the phone is bound to the caller.

    A wrong or expired code is a normal outcome: isSuccess=false with 200.
    """
    result = await service.verify_phone(user_id, body.mob, body.sms_code)
    return VerifySmsCodeResponse(is_success=result.is_success)


@router.post("/reg", response_model=RegisterResponse)
@limit_writes
async def register(
    request: Request,
    body: RegisterRequest,
    user_id: CurrentUserId,
    service: Annotated[IdentityService, Depends(get_identity_service_for_write)],
):
    """Complete the profile of a caller whose phone is verified."""
    user = await service.complete_registration(
        user_id,
        body.mob,
        body.name,
        body.id_card_number.upper(),
        body.birthday,
    )
    return RegisterResponse(is_success=True, user=UserResponse.from_result(user))

"""Identity binding service: WeChat login, SMS phone verification, registration.

Drives a user through THIRD_PARTY_VERIFIED -> PHONE_VERIFIED -> REGISTERED.
The user row is the system of record; pending SMS challenges live only in the
cache under sms_code:user:<id> and expire after SMS_CODE_TTL_SECONDS.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from urllib.parse import quote

from app.application.dtos.auth import (
    LoginResult,
    SmsChallenge,
    SmsSendResult,
    VerifyResult,
)
from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import IUserRepository
from app.application.interfaces.services import (
    ICacheService,
    ISmsSender,
    ITokenIssuer,
    IWeChatOAuthClient,
)
from app.core.constants import SMS_CODE_TTL_SECONDS
from app.domain.exceptions import (
    PhoneAlreadyBoundException,
    PhoneNotVerifiedException,
    ResourceNotFoundException,
    SmsDeliveryFailedException,
    UpstreamServiceException,
    ValidationException,
)
from app.infrastructure.cache.keys import sms_code_key, wx_token_key
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_sms_code
from app.shared.utils.sanitization import mask_identifier, mask_phone

logger = get_logger(__name__)

FAKE_WECHAT_PATH = "/api/v1/auth/login/fake-wechat"


def build_login_url(
    redirect_uri: str,
    base_url: str,
    wechat_client: IWeChatOAuthClient | None,
    scope: str = "snsapi_base",
) -> str:
    """Return the URL the browser should be sent to for WeChat authorization.

    Args:
        redirect_uri: Where the provider sends the user back with ?code=.
        base_url: This service's external base URL (used in development mode).
        wechat_client: Configured client, or None for the local stand-in.
        scope: OAuth scope placed in the stand-in URL.
    """
    if not redirect_uri:
        raise ValidationException("redirect_uri is required", field="redirect_uri")
    if wechat_client is not None:
        return wechat_client.build_authorize_url(redirect_uri)
    return (
        f"{base_url.rstrip('/')}{FAKE_WECHAT_PATH}"
        f"?redirect_uri={quote(redirect_uri, safe='')}"
        f"&response_type=code&scope={scope}#wechat_redirect"
    )


class IdentityService:
    """Binds a WeChat identity to a user and walks it through phone verification.

    Without a WeChat client (no app id configured) the service runs in
    development mode: login redirects to the local stand-in endpoint and
    the authorization code itself is used as the openid.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        cache: ICacheService,
        token_issuer: ITokenIssuer,
        sms_sender: ISmsSender,
        wechat_client: IWeChatOAuthClient | None = None,
        *,
        wx_scope: str = "snsapi_base",
        code_generator: Callable[[], str] = generate_sms_code,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._user_repo = user_repo
        self._cache = cache
        self._token_issuer = token_issuer
        self._sms_sender = sms_sender
        self._wechat = wechat_client
        self._wx_scope = wx_scope
        self._code_generator = code_generator
        self._clock = clock

    def initiate_login(self, redirect_uri: str, base_url: str) -> str:
        """Authorization URL for redirect_uri (see build_login_url)."""
        return build_login_url(redirect_uri, base_url, self._wechat, self._wx_scope)

    async def exchange_code_for_token(self, code: str) -> LoginResult:
        """Exchange an authorization code for an access token and the bound user.

        The first successful exchange for an openid creates the user; later
        exchanges return the same user.

        Raises:
            ValidationException: code is empty.
            UpstreamServiceException: provider exchange failed.
        """
        if not code:
            raise ValidationException("code is required", field="code")
        if self._wechat is not None:
            wx_token = await self._wechat.exchange_code(code)
            open_id = wx_token.open_id
            await self._cache_wx_token(open_id, wx_token.raw, wx_token.expires_in)
        else:
            open_id = code

        user, created = await self._user_repo.get_or_create_by_open_id(open_id)
        token = self._token_issuer.issue_token(user.id)
        logger.info(
            "Login for openid %s -> user %s (new=%s)",
            mask_identifier(open_id),
            user.id,
            created,
        )
        return LoginResult(token=token, user=user)

    async def _cache_wx_token(self, open_id: str, raw: dict, expires_in: int) -> None:
        """Best-effort cache of the provider token response; failures are logged only."""
        try:
            stored = await self._cache.set(
                wx_token_key(open_id), raw, max(int(expires_in), 1)
            )
        except ValueError:
            logger.warning(
                "Cannot cache WeChat token for openid %s: invalid key",
                mask_identifier(open_id),
            )
            return
        if not stored:
            logger.warning(
                "WeChat token for openid %s not cached", mask_identifier(open_id)
            )

    async def _require_user(self, user_id: int) -> UserResult:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def request_phone_verification(self, user_id: int, mob: str) -> SmsSendResult:
        """Send a fresh 6-digit code to mob and store it as the user's pending challenge.

        A new request overwrites any pending challenge for the user.

        Raises:
            ResourceNotFoundException: user does not exist.
            PhoneAlreadyBoundException: another user already has mob.
            SmsDeliveryFailedException: provider rejected or could not be reached.
            UpstreamServiceException: the challenge could not be stored.
        """
        await self._require_user(user_id)
        if await self._user_repo.is_mob_bound_to_other(mob, user_id):
            raise PhoneAlreadyBoundException()

        sms_code = self._code_generator()
        try:
            accepted = await self._sms_sender.send_code(mob, [sms_code])
        except Exception:
            logger.exception("SMS provider error sending to %s", mask_phone(mob))
            raise SmsDeliveryFailedException() from None
        if not accepted:
            raise SmsDeliveryFailedException()

        challenge = SmsChallenge(
            user_id=user_id, mob=mob, sms_code=sms_code, created_at=self._clock()
        )
        stored = await self._cache.set(
            sms_code_key(user_id), challenge.to_cache(), SMS_CODE_TTL_SECONDS
        )
        if not stored:
            logger.error(
                "SMS challenge for user %s could not be stored; code sent to %s is unusable",
                user_id,
                mask_phone(mob),
            )
            raise UpstreamServiceException("cache", "Verification store unavailable")
        logger.info("SMS challenge issued for user %s to %s", user_id, mask_phone(mob))
        return SmsSendResult(is_success=True, expire_seconds=SMS_CODE_TTL_SECONDS)

    async def verify_phone(self, user_id: int, mob: str, sms_code: str) -> VerifyResult:
        """Check the pending challenge and bind mob to the user on a match.

        The challenge is not consumed: repeating a successful verification
        with the same live code succeeds again and rewrites the same mob.

        Raises:
            PhoneAlreadyBoundException: mob was bound to another user meanwhile.
        """
        challenge = SmsChallenge.from_cache(await self._cache.get(sms_code_key(user_id)))
        if challenge is None or challenge.user_id != user_id:
            logger.info("No pending SMS challenge for user %s", user_id)
            return VerifyResult(is_success=False)
        if not challenge.matches(mob, sms_code):
            logger.info("SMS challenge mismatch for user %s", user_id)
            return VerifyResult(is_success=False)

        if not await self._user_repo.bind_mob(user_id, mob):
            raise ResourceNotFoundException("user", user_id)
        logger.info("Phone %s verified for user %s", mask_phone(mob), user_id)
        return VerifyResult(is_success=True)

    async def complete_registration(
        self,
        user_id: int,
        mob: str,
        name: str,
        id_card_number: str,
        birthday: date,
    ) -> UserResult:
        """Fill in the profile of a user whose phone mob is verified.

        Raises:
            ResourceNotFoundException: user does not exist.
            PhoneNotVerifiedException: mob is not the user's verified phone.
        """
        user = await self._require_user(user_id)
        if not user.mob or user.mob != mob:
            raise PhoneNotVerifiedException()

        affected = await self._user_repo.complete_registration(
            user_id, mob, name, id_card_number, birthday
        )
        if affected == 0:
            # Phone changed between the read and the guarded update.
            raise PhoneNotVerifiedException()
        logger.info("Registration completed for user %s", user_id)
        return await self._require_user(user_id)

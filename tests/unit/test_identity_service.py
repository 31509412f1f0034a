"""Tests for IdentityService: login, SMS challenge, verification and registration.

Uses the in-memory cache, user repository and SMS sender from conftest.
"""

from datetime import date
from urllib.parse import parse_qs, urlsplit

import pytest

from app.application.dtos.auth import WeChatAccessToken
from app.application.services.identity_service import IdentityService
from app.domain.enums import RegistrationState
from app.domain.exceptions import (
    PhoneAlreadyBoundException,
    PhoneNotVerifiedException,
    ResourceNotFoundException,
    SmsDeliveryFailedException,
    UpstreamServiceException,
    ValidationException,
)
from app.infrastructure.cache.keys import sms_code_key, wx_token_key

MOB = "13800138000"
OTHER_MOB = "13900139000"


class StubWeChatClient:
    def __init__(self, open_id: str = "oWx_user_1", error: Exception | None = None):
        self.open_id = open_id
        self.error = error
        self.codes: list[str] = []

    def build_authorize_url(self, redirect_uri: str) -> str:
        return f"https://open.weixin.qq.com/connect/oauth2/authorize?redirect_uri={redirect_uri}"

    async def exchange_code(self, code: str) -> WeChatAccessToken:
        self.codes.append(code)
        if self.error is not None:
            raise self.error
        return WeChatAccessToken(
            open_id=self.open_id,
            access_token="ACCESS",
            expires_in=7200,
            raw={"openid": self.open_id, "access_token": "ACCESS", "expires_in": 7200},
        )


@pytest.fixture
def make_service(user_repo, cache, token_issuer, sms_sender, clock):
    def make(wechat_client=None, codes=("012345",)) -> IdentityService:
        pending = list(codes)
        return IdentityService(
            user_repo,
            cache,
            token_issuer,
            sms_sender,
            wechat_client,
            code_generator=lambda: pending.pop(0) if len(pending) > 1 else pending[0],
            clock=clock,
        )

    return make


async def test_login_url_dev_mode_points_at_fake_endpoint(make_service) -> None:
    url = make_service().initiate_login("https://app.example/cb?x=1", "http://svc/")
    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
        "http://svc/api/v1/auth/login/fake-wechat"
    )
    query = parse_qs(parts.query)
    assert query["redirect_uri"] == ["https://app.example/cb?x=1"]
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["snsapi_base"]
    assert parts.fragment == "wechat_redirect"


async def test_login_url_is_idempotent(make_service) -> None:
    service = make_service()
    assert service.initiate_login("https://a/cb", "http://svc") == service.initiate_login(
        "https://a/cb", "http://svc"
    )


async def test_login_url_uses_wechat_client_when_configured(make_service) -> None:
    url = make_service(StubWeChatClient()).initiate_login("https://a/cb", "http://svc")
    assert url.startswith("https://open.weixin.qq.com/")


async def test_login_url_requires_redirect_uri(make_service) -> None:
    with pytest.raises(ValidationException):
        make_service().initiate_login("", "http://svc")


async def test_first_exchange_creates_user_and_later_reuses_it(
    make_service, user_repo, token_issuer
) -> None:
    service = make_service()
    first = await service.exchange_code_for_token("dev-openid")
    second = await service.exchange_code_for_token("dev-openid")
    assert first.user.id == second.user.id
    assert len(user_repo.users) == 1
    assert first.user.wx_open_id == "dev-openid"
    assert first.user.state is RegistrationState.THIRD_PARTY_VERIFIED
    assert token_issuer.verify_token(first.token).user_id == first.user.id


async def test_exchange_with_wechat_caches_raw_token(make_service, cache) -> None:
    wechat = StubWeChatClient(open_id="oWx_abc")
    result = await make_service(wechat).exchange_code_for_token("CODE")
    assert wechat.codes == ["CODE"]
    assert result.user.wx_open_id == "oWx_abc"
    assert (await cache.get(wx_token_key("oWx_abc")))["openid"] == "oWx_abc"
    assert (wx_token_key("oWx_abc"), 7200) in cache.set_calls


async def test_exchange_succeeds_when_token_cache_write_fails(
    make_service, cache
) -> None:
    cache.fail_writes = True
    result = await make_service(StubWeChatClient()).exchange_code_for_token("CODE")
    assert result.token


async def test_exchange_upstream_failure_creates_no_user(make_service, user_repo) -> None:
    wechat = StubWeChatClient(error=UpstreamServiceException("wechat"))
    with pytest.raises(UpstreamServiceException):
        await make_service(wechat).exchange_code_for_token("BAD")
    assert user_repo.users == {}


async def test_exchange_requires_code(make_service) -> None:
    with pytest.raises(ValidationException):
        await make_service().exchange_code_for_token("")


async def test_request_verification_sends_and_stores_challenge(
    make_service, user_repo, cache, sms_sender
) -> None:
    user = user_repo.add(wx_open_id="o1")
    result = await make_service().request_phone_verification(user.id, MOB)
    assert result.is_success is True
    assert result.expire_seconds == 600
    assert sms_sender.sent == [(MOB, ["012345"])]
    stored = await cache.get(sms_code_key(user.id))
    assert stored["mob"] == MOB
    assert stored["sms_code"] == "012345"
    assert (sms_code_key(user.id), 600) in cache.set_calls


async def test_request_verification_unknown_user(make_service, sms_sender) -> None:
    with pytest.raises(ResourceNotFoundException):
        await make_service().request_phone_verification(999, MOB)
    assert sms_sender.sent == []


async def test_request_verification_phone_bound_elsewhere(
    make_service, user_repo, sms_sender
) -> None:
    user_repo.add(wx_open_id="o1", mob=MOB)
    second = user_repo.add(wx_open_id="o2")
    with pytest.raises(PhoneAlreadyBoundException):
        await make_service().request_phone_verification(second.id, MOB)
    assert sms_sender.sent == []


async def test_rebinding_own_phone_succeeds(make_service, user_repo, sms_sender) -> None:
    user = user_repo.add(wx_open_id="o1", mob=MOB)
    service = make_service()
    sent = await service.request_phone_verification(user.id, MOB)
    assert sent.is_success is True
    assert sms_sender.sent == [(MOB, ["012345"])]
    result = await service.verify_phone(user.id, MOB, "012345")
    assert result.is_success is True
    assert user_repo.users[user.id].mob == MOB
    assert user_repo.users[user.id].state is RegistrationState.PHONE_VERIFIED


async def test_request_verification_provider_rejects(
    make_service, user_repo, cache, sms_sender
) -> None:
    user = user_repo.add(wx_open_id="o1")
    sms_sender.result = False
    with pytest.raises(SmsDeliveryFailedException):
        await make_service().request_phone_verification(user.id, MOB)
    assert await cache.get(sms_code_key(user.id)) is None


async def test_request_verification_provider_raises(
    make_service, user_repo, cache, sms_sender
) -> None:
    user = user_repo.add(wx_open_id="o1")
    sms_sender.error = ConnectionError("down")
    with pytest.raises(SmsDeliveryFailedException):
        await make_service().request_phone_verification(user.id, MOB)
    assert await cache.get(sms_code_key(user.id)) is None


async def test_request_verification_store_failure_is_reported(
    make_service, user_repo, cache
) -> None:
    user = user_repo.add(wx_open_id="o1")
    cache.fail_writes = True
    with pytest.raises(UpstreamServiceException) as exc_info:
        await make_service().request_phone_verification(user.id, MOB)
    assert exc_info.value.details == {"service": "cache"}


async def test_verify_correct_code_binds_phone(make_service, user_repo) -> None:
    user = user_repo.add(wx_open_id="o1")
    service = make_service()
    await service.request_phone_verification(user.id, MOB)
    result = await service.verify_phone(user.id, MOB, "012345")
    assert result.is_success is True
    assert user_repo.users[user.id].mob == MOB
    assert user_repo.users[user.id].state is RegistrationState.PHONE_VERIFIED


async def test_verify_is_repeatable_within_ttl(make_service, user_repo) -> None:
    user = user_repo.add(wx_open_id="o1")
    service = make_service()
    await service.request_phone_verification(user.id, MOB)
    assert (await service.verify_phone(user.id, MOB, "012345")).is_success
    assert (await service.verify_phone(user.id, MOB, "012345")).is_success
    assert user_repo.users[user.id].mob == MOB


@pytest.mark.parametrize(
    ("mob", "code"),
    [(MOB, "999999"), (OTHER_MOB, "012345"), (MOB, "12345"), (MOB, " 012345")],
)
async def test_verify_mismatch_returns_false_and_leaves_user(
    make_service, user_repo, mob, code
) -> None:
    user = user_repo.add(wx_open_id="o1")
    service = make_service()
    await service.request_phone_verification(user.id, MOB)
    result = await service.verify_phone(user.id, mob, code)
    assert result.is_success is False
    assert user_repo.users[user.id].mob is None


async def test_verify_without_challenge_returns_false(make_service, user_repo) -> None:
    user = user_repo.add(wx_open_id="o1")
    assert (await make_service().verify_phone(user.id, MOB, "012345")).is_success is False


async def test_verify_after_expiry_returns_false(make_service, user_repo, clock) -> None:
    user = user_repo.add(wx_open_id="o1")
    service = make_service()
    await service.request_phone_verification(user.id, MOB)
    clock.advance(599)
    assert (await service.verify_phone(user.id, MOB, "012345")).is_success is True
    clock.advance(1)
    assert (await service.verify_phone(user.id, MOB, "012345")).is_success is False


async def test_new_request_replaces_previous_code(make_service, user_repo) -> None:
    user = user_repo.add(wx_open_id="o1")
    service = make_service(codes=("111111", "222222"))
    await service.request_phone_verification(user.id, MOB)
    await service.request_phone_verification(user.id, MOB)
    assert (await service.verify_phone(user.id, MOB, "111111")).is_success is False
    assert (await service.verify_phone(user.id, MOB, "222222")).is_success is True


async def test_challenge_is_scoped_to_its_user(make_service, user_repo) -> None:
    first = user_repo.add(wx_open_id="o1")
    second = user_repo.add(wx_open_id="o2")
    service = make_service()
    await service.request_phone_verification(first.id, MOB)
    assert (await service.verify_phone(second.id, MOB, "012345")).is_success is False


async def test_verify_when_phone_taken_meanwhile(make_service, user_repo) -> None:
    first = user_repo.add(wx_open_id="o1")
    second = user_repo.add(wx_open_id="o2")
    service = make_service()
    await service.request_phone_verification(first.id, MOB)
    await service.request_phone_verification(second.id, MOB)
    assert (await service.verify_phone(second.id, MOB, "012345")).is_success
    with pytest.raises(PhoneAlreadyBoundException):
        await service.verify_phone(first.id, MOB, "012345")


async def test_complete_registration_after_verification(make_service, user_repo) -> None:
    user = user_repo.add(wx_open_id="o1", mob=MOB)
    updated = await make_service().complete_registration(
        user.id, MOB, "Zhang San", "11010519491231002X", date(1949, 12, 31)
    )
    assert updated.name == "Zhang San"
    assert updated.id_card_number == "11010519491231002X"
    assert updated.birthday == date(1949, 12, 31)
    assert updated.state is RegistrationState.REGISTERED


async def test_complete_registration_without_verified_phone(
    make_service, user_repo
) -> None:
    user = user_repo.add(wx_open_id="o1")
    with pytest.raises(PhoneNotVerifiedException):
        await make_service().complete_registration(
            user.id, MOB, "Li Si", "110105194912310021", date(1949, 12, 31)
        )
    assert user_repo.users[user.id].name is None


async def test_complete_registration_with_different_phone(
    make_service, user_repo
) -> None:
    user = user_repo.add(wx_open_id="o1", mob=MOB)
    with pytest.raises(PhoneNotVerifiedException):
        await make_service().complete_registration(
            user.id, OTHER_MOB, "Li Si", "110105194912310021", date(1949, 12, 31)
        )


async def test_complete_registration_unknown_user(make_service) -> None:
    with pytest.raises(ResourceNotFoundException):
        await make_service().complete_registration(
            42, MOB, "Li Si", "110105194912310021", date(1949, 12, 31)
        )

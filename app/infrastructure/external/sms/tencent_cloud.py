"""Tencent Cloud SMS sender (SendSms, API version 2021-01-11).

Uses tencentcloud-sdk-python (sync) via asyncio.to_thread. Returns False
(never raises) when the provider rejects the message or cannot be reached.
"""

from __future__ import annotations

import asyncio

from tencentcloud.common import credential
from tencentcloud.common.exception.tencent_cloud_sdk_exception import (
    TencentCloudSDKException,
)
from tencentcloud.common.profile.client_profile import ClientProfile
from tencentcloud.common.profile.http_profile import HttpProfile
from tencentcloud.sms.v20210111 import models, sms_client

from app.core.config import Settings
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.telemetry import get_tracer
from app.shared.utils.sanitization import mask_phone

logger = get_logger(__name__)
tracer = get_tracer(__name__)

STATUS_OK = "Ok"


def to_e164(mob: str) -> str:
    """Normalize a mainland number to E.164 (+86...), as the API requires."""
    if mob.startswith("+"):
        return mob
    if mob.startswith("0086"):
        return f"+86{mob[4:]}"
    return f"+86{mob}"


def build_sms_client(settings: Settings) -> sms_client.SmsClient:
    """SDK client for the configured region and endpoint."""
    if not settings.tencentcloud_secret_id or settings.tencentcloud_secret_key is None:
        raise ValueError("Tencent Cloud SMS requires secret id and secret key")
    cred = credential.Credential(
        settings.tencentcloud_secret_id,
        settings.tencentcloud_secret_key.get_secret_value(),
    )
    http_profile = HttpProfile()
    http_profile.endpoint = settings.tencentcloud_sms_endpoint
    http_profile.reqTimeout = max(int(settings.http_timeout_seconds), 1)
    client_profile = ClientProfile()
    client_profile.httpProfile = http_profile
    return sms_client.SmsClient(cred, settings.tencentcloud_region, client_profile)


class TencentCloudSmsSender:
    """Sends templated verification messages through Tencent Cloud SMS."""

    def __init__(
        self,
        settings: Settings,
        *,
        client: sms_client.SmsClient | None = None,
    ) -> None:
        self._client = client or build_sms_client(settings)
        self._sdk_app_id = settings.sms_sdk_app_id
        self._sign_name = settings.sms_sign_name
        self._template_id = settings.sms_template_id

    def _build_request(self, mob: str, template_params: list[str]) -> models.SendSmsRequest:
        request = models.SendSmsRequest()
        request.PhoneNumberSet = [to_e164(mob)]
        request.SmsSdkAppId = self._sdk_app_id
        request.SignName = self._sign_name
        request.TemplateId = self._template_id
        request.TemplateParamSet = list(template_params)
        return request

    async def send_code(self, mob: str, template_params: list[str]) -> bool:
        """Send the template to mob. True only if every recipient status is "Ok"."""
        request = self._build_request(mob, template_params)
        with tracer.start_as_current_span("sms.send_code"):
            try:
                response = await asyncio.to_thread(self._client.SendSms, request)
            except TencentCloudSDKException as e:
                logger.error(
                    "SMS send to %s rejected: code=%s request_id=%s",
                    mask_phone(mob),
                    e.get_code(),
                    e.get_request_id(),
                )
                return False
        return self._is_accepted(mob, response)

    def _is_accepted(self, mob: str, response: models.SendSmsResponse) -> bool:
        statuses = response.SendStatusSet or []
        codes = [s.Code for s in statuses]
        if not codes or any(code != STATUS_OK for code in codes):
            logger.error("SMS send to %s not accepted: %s", mask_phone(mob), codes)
            return False
        logger.info("SMS sent to %s", mask_phone(mob))
        return True

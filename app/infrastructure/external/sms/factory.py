"""SMS sender factory: Tencent Cloud when configured, otherwise the fake sender."""

from app.application.interfaces.services import ISmsSender
from app.core.config import Settings
from app.infrastructure.external.sms.fake import FakeSmsSender
from app.infrastructure.external.sms.tencent_cloud import TencentCloudSmsSender
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def create_sms_sender(settings: Settings) -> ISmsSender:
    """Create the SMS sender for the configured provider.

    Returns:
        TencentCloudSmsSender when a Tencent Cloud key pair is set, else FakeSmsSender.
    """
    if settings.tencent_sms_enabled:
        return TencentCloudSmsSender(settings)
    logger.warning("Tencent Cloud SMS not configured; using fake SMS sender")
    return FakeSmsSender()

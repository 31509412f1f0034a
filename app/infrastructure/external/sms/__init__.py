"""SMS providers: Tencent Cloud sender, development fake, and factory."""

from app.infrastructure.external.sms.factory import create_sms_sender
from app.infrastructure.external.sms.fake import FakeSmsSender
from app.infrastructure.external.sms.tencent_cloud import TencentCloudSmsSender

__all__ = ["FakeSmsSender", "TencentCloudSmsSender", "create_sms_sender"]

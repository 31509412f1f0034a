"""Development SMS sender: accepts every message without contacting a provider."""

from app.shared.telemetry.logging import get_logger
from app.shared.utils.sanitization import mask_phone

logger = get_logger(__name__)


class FakeSmsSender:
    """Always succeeds. Used when Tencent Cloud credentials are not configured."""

    def __init__(self) -> None:
        self.sent_count = 0

    async def send_code(self, mob: str, template_params: list[str]) -> bool:
        self.sent_count += 1
        logger.info(
            "Fake SMS accepted for %s (%d params, not delivered)",
            mask_phone(mob),
            len(template_params),
        )
        return True

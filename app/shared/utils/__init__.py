"""Shared utilities: datetime, generators, log sanitization."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_sms_code, generate_token_id
from app.shared.utils.sanitization import mask_identifier, mask_phone

__all__ = [
    "ensure_utc",
    "generate_sms_code",
    "generate_token_id",
    "mask_identifier",
    "mask_phone",
    "utc_now",
]

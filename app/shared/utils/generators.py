"""Secret and identifier generators (SMS codes, token ids)."""

import secrets
import uuid

from app.core.constants import SMS_CODE_LENGTH


def generate_sms_code(length: int = SMS_CODE_LENGTH) -> str:
    """Generate a numeric verification code, uniform over the full code space.

    Draws from [0, 10**length) with a CSPRNG and zero-pads, so "000123"
    is as likely as "987654" and no leading digit is favoured.

    Args:
        length: Number of digits (default 6).

    Returns:
        Zero-padded decimal string of exactly ``length`` characters.
    """
    if length < 1:
        raise ValueError("length must be positive")
    return str(secrets.randbelow(10**length)).zfill(length)


def generate_token_id() -> str:
    """Return a fresh unique token id (JWT jti)."""
    return uuid.uuid4().hex

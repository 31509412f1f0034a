"""Log sanitization: mask personal data before it reaches log records.

Phone numbers are logged masked; SMS codes, identity card numbers and
provider secrets are never logged at all.
"""


def mask_phone(mob: str | None) -> str:
    """Mask a phone number for logging, keeping the first 3 and last 4 digits.

    Args:
        mob: Raw phone number (may include +86 prefix).

    Returns:
        Masked value such as ``138****0000``; ``"<none>"`` for empty input.
    """
    if not mob:
        return "<none>"
    if len(mob) <= 7:
        return "*" * len(mob)
    return f"{mob[:3]}{'*' * (len(mob) - 7)}{mob[-4:]}"


def mask_identifier(value: str | None, keep: int = 4) -> str:
    """Mask an opaque identifier (e.g. WeChat openid) keeping a short prefix.

    Args:
        value: Raw identifier.
        keep: Number of leading characters to keep.

    Returns:
        Prefix followed by ``***``; ``"<none>"`` for empty input.
    """
    if not value:
        return "<none>"
    return f"{value[:keep]}***"

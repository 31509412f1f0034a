"""Cache key builders. Single place for key format (DRY).

String components must not contain CACHE_KEY_SEP; integer components are
rendered in canonical decimal form. Every builder uses its own prefix and a
fixed number of components, so distinct parameter tuples never share a key.
"""

from app.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_GDP,
    CACHE_PREFIX_INFO,
    CACHE_PREFIX_SMS_CODE,
    CACHE_PREFIX_WX_TOKEN,
    QUERY_LABEL_SEP,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty or contains CACHE_KEY_SEP.
    """
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def _int_component(value: int, name: str) -> str:
    """Render an integer key component; rejects bools and non-ints."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Cache key component {name!r} must be an int")
    return str(value)


def query_label(*parts: int) -> str:
    """Human-readable query label stored alongside cached results (e.g. "1-10")."""
    return QUERY_LABEL_SEP.join(_int_component(p, "part") for p in parts)


def sms_code_key(user_id: int) -> str:
    """Cache key for the pending SMS challenge of a user (one per user)."""
    return (
        f"{CACHE_PREFIX_SMS_CODE}{CACHE_KEY_SEP}user{CACHE_KEY_SEP}"
        f"{_int_component(user_id, 'user_id')}"
    )


def wx_token_key(open_id: str) -> str:
    """Cache key for the raw WeChat token exchange response of an openid."""
    _validate_key_component(open_id, "open_id")
    return f"{CACHE_PREFIX_WX_TOKEN}{CACHE_KEY_SEP}openid{CACHE_KEY_SEP}{open_id}"


def info_page_key(page_number: int, page_size: int) -> str:
    """Cache key for one page of the Info listing."""
    return (
        f"{CACHE_PREFIX_INFO}{CACHE_KEY_SEP}page{CACHE_KEY_SEP}"
        f"{_int_component(page_number, 'page_number')}{CACHE_KEY_SEP}"
        f"{_int_component(page_size, 'page_size')}"
    )


def gdp_range_key(year_start: int, year_end: int) -> str:
    """Cache key for Gdp records within an inclusive year range."""
    return (
        f"{CACHE_PREFIX_GDP}{CACHE_KEY_SEP}range{CACHE_KEY_SEP}"
        f"{_int_component(year_start, 'year_start')}{CACHE_KEY_SEP}"
        f"{_int_component(year_end, 'year_end')}"
    )

"""Cache: Redis service and cache key utilities.

Backs pending SMS challenges, the WeChat token cache and query result
caching. Key format is in keys.py (DRY).
"""

from app.infrastructure.cache.keys import (
    gdp_range_key,
    info_page_key,
    query_label,
    sms_code_key,
    wx_token_key,
)
from app.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheService",
    "gdp_range_key",
    "info_page_key",
    "query_label",
    "sms_code_key",
    "wx_token_key",
]

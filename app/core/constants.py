"""Core constants: cache key prefixes, TTL values and shared literals.

Single source of truth for cache key structure (DRY). Used by
app.infrastructure.cache.keys and the identity/reference services.
"""

# Cache key prefixes
CACHE_PREFIX_SMS_CODE = "sms_code"
CACHE_PREFIX_WX_TOKEN = "wx_token"
CACHE_PREFIX_INFO = "info"
CACHE_PREFIX_GDP = "gdp"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Delimiter for the human-readable query label stored with cached results ("1-10", "2000-2010")
QUERY_LABEL_SEP = "-"

# Pending SMS challenge lifetime (fixed)
SMS_CODE_TTL_SECONDS = 600
SMS_CODE_LENGTH = 6

# Pagination defaults for reference data listings
DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Mainland China mobile number (optional +86 / 0086 prefix)
MOBILE_PATTERN = (
    r"^(?:(?:\+|00)86)?1(?:(?:3[\d])|(?:4[5-79])|(?:5[0-35-9])|(?:6[5-7])"
    r"|(?:7[0-8])|(?:8[\d])|(?:9[1589]))\d{8}$"
)
SMS_CODE_PATTERN = r"^\d{6}$"
# 18-character resident identity card number: 17 digits + digit or X
ID_CARD_PATTERN = r"^\d{17}[\dXx]$"

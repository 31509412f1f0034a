"""Domain enums: identity registration state."""

from enum import Enum


class RegistrationState(str, Enum):
    """Where a user stands in the binding flow.

    ANONYMOUS never appears on a stored user; it is the state of a caller
    without a token. Every stored user has passed the WeChat exchange.
    """

    ANONYMOUS = "anonymous"
    THIRD_PARTY_VERIFIED = "third_party_verified"
    PHONE_VERIFIED = "phone_verified"
    REGISTERED = "registered"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]

"""Security: JWT access token issuing and verification."""

from app.infrastructure.security.jwt import TokenClaims, TokenIssuer

__all__ = [
    "TokenClaims",
    "TokenIssuer",
]

"""JWT access tokens: issue and verify.

Tokens are HS256-signed with the configured secret and carry sub/id (user
id), jti, iss, aud, iat and exp. Nothing is persisted; a valid, unexpired,
correctly signed token is the only proof of identity.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import Settings
from app.domain.exceptions import AuthenticationException
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_token_id


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of an access token."""

    user_id: int
    token_id: str
    expires_at: datetime


class TokenIssuer:
    """Mints and verifies access tokens for a user id."""

    def __init__(self, settings: Settings) -> None:
        self._key = settings.secret_key.get_secret_value()
        self._algorithm = settings.algorithm
        self._issuer = settings.jwt_issuer
        self._audience = settings.jwt_audience
        self._lifetime = timedelta(minutes=settings.access_token_expire_minutes)

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue_token(self, subject_id: int) -> str:
        """Create a signed token for subject_id with a fresh jti.

        Args:
            subject_id: Internal user id.

        Returns:
            Encoded JWT string.
        """
        now = utc_now()
        claims: dict[str, Any] = {
            "sub": str(subject_id),
            "id": str(subject_id),
            "jti": generate_token_id(),
            "iss": self._issuer,
            "aud": self._audience,
            "iat": now,
            "exp": now + self._lifetime,
        }
        return cast(str, jwt.encode(claims, self._key, algorithm=self._algorithm))

    def verify_token(self, token: str) -> TokenClaims:
        """Verify signature, issuer, audience and expiry; return the claims.

        Args:
            token: JWT string (e.g. from Authorization header).

        Raises:
            AuthenticationException: If the token is invalid, expired, or
                missing required claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "require_exp": True,
                    "require_sub": True,
                    "require_iss": True,
                    "require_aud": True,
                    "require_jti": True,
                },
            )
        except JWTError as e:
            raise AuthenticationException("Invalid or expired token") from e
        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub.isdigit():
            raise AuthenticationException("Invalid token subject")
        return TokenClaims(
            user_id=int(sub),
            token_id=str(payload["jti"]),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )

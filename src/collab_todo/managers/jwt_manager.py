"""
# JWT Manager

Issues and verifies the HS256 bearer tokens used by every authenticated endpoint.

## Claims

| Claim | Content |
|-------|---------|
| `sub` | User ID |
| `userId` | User ID (kept for existing clients) |
| `email` | User email |
| `name` | Display name |
| `iss` | `settings.JWT_ISSUER` |
| `aud` | `settings.JWT_AUDIENCE` |
| `iat` / `exp` | Issue and expiry time (epoch seconds) |

Signature, issuer, audience and expiry are all checked on verification. Any failure surfaces as
`AuthenticationError` with code `INVALID_TOKEN`.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

from jose import ExpiredSignatureError, JWTError, jwt

from collab_todo.config import settings
from collab_todo.exceptions import AuthenticationError
from collab_todo.managers.logging_manager import get_logger
from collab_todo.models.user_models import User

logger = get_logger(prefix="[JWTManager]")


class JWTManager:
    """Stateless token issuer/verifier bound to one signing key."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "todo-app-server",
        audience: str = "todo-app-users",
        expire_minutes: int = 60,
    ):
        if not secret_key:
            raise ValueError("JWT secret key must not be empty")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls) -> "JWTManager":
        return cls(
            secret_key=settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def issue_token(self, user: User) -> Tuple[str, datetime]:
        """
        Create a signed token for `user`.

        Returns:
            Tuple[str, datetime]: The encoded token and its expiry time (UTC).
        """
        issued_at = datetime.now(timezone.utc).replace(microsecond=0)
        expires_at = issued_at + timedelta(minutes=self.expire_minutes)
        claims = {
            "sub": user.id,
            "userId": user.id,
            "email": user.email,
            "name": user.name,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._secret_key, algorithm=self.algorithm)
        logger.debug("Issued token for user %s, expires %s", user.id, expires_at.isoformat())
        return token, expires_at

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a token.

        Raises:
            AuthenticationError: If the token is expired, malformed, wrongly signed, or
                carries the wrong issuer or audience.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except ExpiredSignatureError as e:
            raise AuthenticationError("Token has expired", code="INVALID_TOKEN") from e
        except JWTError as e:
            raise AuthenticationError("Invalid token", code="INVALID_TOKEN") from e

        if not claims.get("sub"):
            raise AuthenticationError("Token has no subject", code="INVALID_TOKEN")
        return claims

    @staticmethod
    def get_token_remaining_time(claims: Dict[str, Any]) -> int:
        """Seconds until expiry, never negative."""
        remaining = int(claims.get("exp", 0)) - int(datetime.now(timezone.utc).timestamp())
        return max(remaining, 0)

    def get_config_info(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "issuer": self.issuer,
            "audience": self.audience,
            "expiration_minutes": self.expire_minutes,
        }

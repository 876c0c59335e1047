"""Signed access tokens."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt

from task_manager.config import Settings
from task_manager.exceptions import TokenExpired, TokenMalformed


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified token."""

    user_id: int
    issued_at: datetime


class TokenService:
    """Issue and verify HMAC-signed JWTs for a single secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        """Build a token service from application settings."""
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            lifetime=timedelta(minutes=settings.jwt_expiration_minutes),
        )

    def issue(self, user_id: int) -> str:
        """Create a token for ``user_id`` that expires after ``lifetime``."""
        issued_at = datetime.now(UTC)
        to_encode = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Check signature and expiry, returning the embedded identity.

        Raises:
            TokenExpired: signature is fine but the token is past its expiry.
            TokenMalformed: anything else, including a bad signature.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpired("Token has expired") from e
        except JWTError as e:
            raise TokenMalformed(f"Token could not be verified: {e}") from e

        try:
            user_id = int(payload["sub"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)
        except (KeyError, TypeError, ValueError) as e:
            raise TokenMalformed("Token payload is missing its subject") from e

        return TokenClaims(user_id=user_id, issued_at=issued_at)

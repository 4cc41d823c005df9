"""JWT Token Service."""

from datetime import datetime, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import get_settings
from app.exceptions import AuthenticationError


class JWTService:
    """Handles JWT token creation and validation."""

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expire_minutes: int | None = None,
    ) -> None:
        settings = get_settings()
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expire_minutes = expire_minutes if expire_minutes is not None else settings.JWT_EXPIRE_MINUTES

    def issue_token(self, user_id: str, now: datetime | None = None) -> str:
        """Create a signed token for the given user, expiring a fixed interval after issue."""
        issued_at = int((now or datetime.now(timezone.utc)).timestamp())
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + self.expire_minutes * 60,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a JWT token. Returns None if invalid."""
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_iat": True},
            )
        except JWTError:
            return None

    def validate_token(self, token: str) -> str:
        """Return the user id carried by a valid token.

        Raises AuthenticationError if the signature is wrong, the token is
        malformed or expired, or it carries no subject.
        """
        payload = self.decode_token(token)
        if not payload:
            raise AuthenticationError("Invalid or expired token")
        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise AuthenticationError("Invalid or expired token")
        return user_id


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service

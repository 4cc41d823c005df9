"""Password hashing service."""

import bcrypt

from app.config import get_settings
from app.exceptions import ValidationFailedError
from app.validation import check_password_strength


class PasswordService:
    """Hashes and verifies passwords with bcrypt."""

    def __init__(self, rounds: int | None = None) -> None:
        self.rounds = rounds or get_settings().BCRYPT_ROUNDS
        self._dummy_hash: bytes | None = None

    def hash(self, password: str) -> str:
        """Hash a password after checking it against the password policy.

        Raises ValidationFailedError if the policy is not met.
        """
        try:
            check_password_strength(password)
        except ValueError as e:
            raise ValidationFailedError(str(e)) from None
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash or over-long password
            return False

    def burn(self, password: str) -> None:
        """Spend the same time as a real check, for callers that have no hash to compare against."""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"unused-password", bcrypt.gensalt(rounds=self.rounds))
        bcrypt.checkpw(password.encode("utf-8")[:72], self._dummy_hash)


_password_service: PasswordService | None = None


def get_password_service() -> PasswordService:
    """Get singleton password service instance."""
    global _password_service
    if _password_service is None:
        _password_service = PasswordService()
    return _password_service

"""Authentication service."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import AuthenticationError, EmailAlreadyRegisteredError
from app.models.user import User
from app.services.password import PasswordService, get_password_service
from app.validation import clean_name, normalize_email

logger = logging.getLogger("todo_api")


class AuthService:
    """Handles user registration and authentication."""

    def __init__(self, passwords: PasswordService | None = None) -> None:
        self.passwords = passwords or get_password_service()

    def get_user_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == normalize_email(email)).first()

    def get_user(self, db: Session, user_id: str) -> User | None:
        return db.get(User, user_id)

    def register(self, db: Session, email: str, password: str, name: str) -> User:
        """Register a new user.

        Raises EmailAlreadyRegisteredError if the email is taken and
        ValidationFailedError if the password does not meet the policy.
        """
        # Policy first: a weak password must not reveal whether the email is taken
        password_hash = self.passwords.hash(password)
        email = normalize_email(email)
        if self.get_user_by_email(db, email):
            raise EmailAlreadyRegisteredError()

        user = User(
            email=email,
            password_hash=password_hash,
            name=clean_name(name),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            db.rollback()
            raise EmailAlreadyRegisteredError() from None
        db.refresh(user)

        logger.info("User registered: %s", user.email)
        return user

    def authenticate(self, db: Session, email: str, password: str) -> User:
        """Authenticate a user by email and password. Raises AuthenticationError on bad credentials."""
        user = self.get_user_by_email(db, email)
        if not user:
            self.passwords.burn(password)
            logger.info("Failed sign-in for unknown email: %s", normalize_email(email))
            raise AuthenticationError("Invalid email or password")

        if not self.passwords.verify(password, user.password_hash):
            logger.info("Failed sign-in for %s", user.email)
            raise AuthenticationError("Invalid email or password")

        return user


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service

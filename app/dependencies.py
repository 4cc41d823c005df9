"""Authentication dependencies for FastAPI routes."""

from dataclasses import dataclass

from fastapi import Request

from app.exceptions import AuthenticationError
from app.services.jwt import get_jwt_service


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated user context."""

    user_id: str


def get_bearer_token(request: Request) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise AuthenticationError("Not authenticated")

    scheme, _, token = auth_header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("Malformed authorization header")
    return token


def get_current_user(request: Request) -> CurrentUser:
    """Validate the bearer token and return the caller's identity. Raises 401 if invalid."""
    token = get_bearer_token(request)
    user_id = get_jwt_service().validate_token(token)
    return CurrentUser(user_id=user_id)

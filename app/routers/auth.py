"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.rate_limit import limiter
from app.schemas.auth import SigninRequest, SignupRequest, TokenResponse, UserResponse
from app.services.auth import get_auth_service
from app.services.jwt import get_jwt_service

logger = logging.getLogger("todo_api")

router = APIRouter(prefix="/auth", tags=["Authentication"])

settings = get_settings()


def _token_response(user) -> TokenResponse:
    token = get_jwt_service().issue_token(user.id)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/signup", response_model=TokenResponse, status_code=201)
@limiter.limit(settings.SIGNUP_RATE_LIMIT)
def signup(request: Request, body: SignupRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Register a new user account and sign it in."""
    user = get_auth_service().register(db, body.email, body.password, body.name)
    return _token_response(user)


@router.post("/signin", response_model=TokenResponse)
@limiter.limit(settings.SIGNIN_RATE_LIMIT)
def signin(request: Request, body: SigninRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Authenticate and receive a JWT token."""
    user = get_auth_service().authenticate(db, body.email, body.password)
    return _token_response(user)


@router.post("/logout")
def logout(user: CurrentUser = Depends(get_current_user)) -> dict:
    """Acknowledge logout. Tokens are stateless; the client discards its copy."""
    logger.info("User logged out: %s", user.user_id)
    return {"detail": "Logged out"}

"""User profile endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.exceptions import AuthenticationError
from app.schemas.auth import UserResponse
from app.services.auth import get_auth_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
def get_me(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Return the signed-in user's profile."""
    account = get_auth_service().get_user(db, user.user_id)
    if not account:
        raise AuthenticationError("User no longer exists")
    return UserResponse.model_validate(account)

"""User routes.

Provides:
- POST /api/users/sync - Create or refresh a user, issue a bearer token
- GET /api/users/me - Current user profile
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlmodel import Session

from studyhub.config import Settings
from studyhub.core.deps import get_app_settings, get_current_user, get_db
from studyhub.core.security import create_access_token
from studyhub.models.user import User
from studyhub.schemas.envelope import SuccessEnvelope, ok
from studyhub.schemas.user import UserRead, UserSession, UserSync
from studyhub.services import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/sync", response_model=SuccessEnvelope[UserSession])
def sync_user(
    request: UserSync,
    session: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """
    Sync a signed-in user and issue a StudyHub token.

    No authentication: this is how clients obtain a token.
    """
    user = user_service.sync_user(session, request)
    token = create_access_token(user, settings)

    return ok(
        UserSession(user=UserRead.model_validate(user), token=token),
        "User synced successfully",
    )


@router.get("/me", response_model=SuccessEnvelope[UserRead])
def get_me(current_user: User = Depends(get_current_user)) -> Dict[str, Any]:
    """Get the authenticated user's profile."""
    return ok(UserRead.model_validate(current_user), "User retrieved successfully")

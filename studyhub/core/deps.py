"""FastAPI dependencies: settings, database session, current user."""
import logging
from typing import Iterator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from studyhub.config import Settings
from studyhub.core.errors import AuthError
from studyhub.core.security import decode_access_token
from studyhub.database import session_scope
from studyhub.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    """Yield a session on the app's engine."""
    yield from session_scope(request.app.state.engine)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """
    Resolve the bearer token to a stored user.

    Fails closed: every problem with the token is a 401.

    Raises:
        AuthError: Token missing, invalid, expired, or user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Authentication failed: No token provided")

    payload = decode_access_token(credentials.credentials, settings)

    user = session.get(User, payload["id"])
    if user is None:
        logger.warning(f"Token for unknown user {payload['id']}")
        raise AuthError("Authentication failed: User not found")

    return user

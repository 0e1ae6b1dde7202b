"""Bearer token signing and verification."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from studyhub.config import Settings
from studyhub.core.errors import AuthError
from studyhub.models.user import User


def create_access_token(user: User, settings: Settings) -> str:
    """
    Sign a token identifying ``user``.

    Args:
        user: User the token is issued for
        settings: Provides secret, algorithm and lifetime

    Returns:
        Encoded JWT string
    """
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=settings.JWT_EXPIRES_SECONDS)
    payload = {
        "id": user.id,
        "clerkId": user.clerk_id,
        "email": user.email,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Verify signature and expiry of ``token``.

    Raises:
        AuthError: If the token is malformed, tampered with or expired
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise AuthError("Authentication failed: Invalid token") from e

    if not payload.get("id"):
        raise AuthError("Authentication failed: Invalid token")
    return payload

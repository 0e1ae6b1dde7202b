"""User sync service.

Sign-in happens with an external identity provider; the client then
syncs the identity here and receives a StudyHub bearer token.
"""
import logging

from sqlalchemy import or_
from sqlmodel import Session, select

from studyhub.models._common import utcnow
from studyhub.models.user import User
from studyhub.schemas.user import UserSync

logger = logging.getLogger(__name__)


def sync_user(session: Session, data: UserSync) -> User:
    """
    Create the user, or refresh the stored profile.

    An existing user is matched by clerk id OR email, so a user whose
    identity-provider id changed keeps their data.

    Args:
        session: Database session
        data: Identity from the sign-in provider

    Returns:
        Stored User instance
    """
    statement = select(User).where(
        or_(User.clerk_id == data.clerk_id, User.email == data.email)
    )
    user = session.exec(statement).first()

    if user:
        user.clerk_id = data.clerk_id
        user.email = data.email
        # Keep stored profile fields when the client sends none
        user.first_name = data.first_name or user.first_name
        user.last_name = data.last_name or user.last_name
        user.profile_picture = data.profile_picture or user.profile_picture
        user.updated_at = utcnow()
        logger.info(f"User synced: id={user.id}")
    else:
        user = User(
            clerk_id=data.clerk_id,
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            profile_picture=data.profile_picture,
        )
        logger.info(f"User created: clerk_id={data.clerk_id}")

    session.add(user)
    session.commit()
    session.refresh(user)
    return user

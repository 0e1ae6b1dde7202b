"""Assignment service layer.

Every function except ``get_assignment_by_id`` is scoped to the owning
user; records owned by someone else behave as if they did not exist.
"""
import logging
from typing import Optional

from sqlalchemy import delete
from sqlmodel import Session, col, select

from studyhub.models._common import utcnow
from studyhub.models.assignment import Assignment
from studyhub.models.conversation import Conversation, Message
from studyhub.schemas.assignment import AssignmentCreate, AssignmentUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {"title", "due_date", "status", "priority"}


def list_assignments(session: Session, user_id: str) -> list[Assignment]:
    """List the user's assignments, soonest due first."""
    statement = (
        select(Assignment)
        .where(Assignment.user_id == user_id)
        .order_by(Assignment.due_date)
    )
    return list(session.exec(statement).all())


def get_assignment(session: Session, user_id: str, assignment_id: str) -> Optional[Assignment]:
    """Get one assignment if it exists and belongs to the user."""
    statement = select(Assignment).where(
        Assignment.id == assignment_id,
        Assignment.user_id == user_id,
    )
    return session.exec(statement).first()


def get_assignment_by_id(session: Session, assignment_id: str) -> Optional[Assignment]:
    """Get an assignment by id regardless of owner."""
    return session.get(Assignment, assignment_id)


def create_assignment(session: Session, user_id: str, data: AssignmentCreate) -> Assignment:
    """Create an assignment owned by ``user_id``."""
    assignment = Assignment(user_id=user_id, **data.model_dump())
    session.add(assignment)
    session.commit()
    session.refresh(assignment)
    logger.info(f"Assignment created: user={user_id}, assignment={assignment.id}")
    return assignment


def update_assignment(
    session: Session,
    user_id: str,
    assignment_id: str,
    data: AssignmentUpdate,
) -> Optional[Assignment]:
    """
    Apply a partial update.

    Returns:
        Updated Assignment, or None if not found/not owned
    """
    assignment = get_assignment(session, user_id, assignment_id)
    if not assignment:
        return None

    for field, value in data.model_dump(exclude_unset=True).items():
        # Required columns ignore explicit nulls
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(assignment, field, value)
    assignment.updated_at = utcnow()

    session.add(assignment)
    session.commit()
    session.refresh(assignment)
    return assignment


def delete_assignment(session: Session, user_id: str, assignment_id: str) -> bool:
    """
    Delete an assignment together with its assistant conversations.

    Returns:
        True if deleted, False if not found/not owned
    """
    assignment = get_assignment(session, user_id, assignment_id)
    if not assignment:
        return False

    conversation_ids = select(Conversation.id).where(Conversation.assignment_id == assignment_id)
    session.exec(delete(Message).where(col(Message.conversation_id).in_(conversation_ids)))
    session.exec(delete(Conversation).where(Conversation.assignment_id == assignment_id))
    session.delete(assignment)
    session.commit()

    logger.info(f"Assignment deleted: user={user_id}, assignment={assignment_id}")
    return True

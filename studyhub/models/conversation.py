"""Conversation and Message SQLModel definitions for the AI assistant.

Models:
- Conversation: one chat thread per (assignment, user) pair
- Message: individual turn in a conversation, append-only
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from studyhub.models._common import UTCDateTime, utcnow

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


class Conversation(SQLModel, table=True):
    """
    Conversation between one user and the assistant about one assignment.

    Identity is the (assignment_id, user_id) pair; the unique constraint
    lets creation run as insert-if-absent.
    """
    __tablename__ = "ai_conversation"
    __table_args__ = (
        UniqueConstraint("assignment_id", "user_id", name="uq_ai_conversation_assignment_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    assignment_id: str = Field(foreign_key="assignment.id", index=True, nullable=False)
    user_id: str = Field(index=True, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class Message(SQLModel, table=True):
    """
    Message in a conversation.

    Role: "user" or "assistant"
    Never updated once stored; timestamps increase with insertion order.
    """
    __tablename__ = "ai_message"

    id: Optional[int] = Field(default=None, primary_key=True)
    conversation_id: int = Field(foreign_key="ai_conversation.id", index=True, nullable=False)
    role: str = Field(default=ROLE_USER, max_length=20)
    text: str = Field()
    timestamp: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)

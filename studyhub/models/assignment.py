"""Assignment SQLModel definition."""
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from studyhub.models._common import UTCDateTime, new_id, utcnow


class Assignment(SQLModel, table=True):
    """
    Assignment owned by a single user.

    All controller queries filter by user_id; the AI assistant reads
    assignments by id alone (see AssistantService).
    """
    __tablename__ = "assignment"

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None)
    due_date: datetime = Field(sa_type=UTCDateTime, nullable=False)
    status: str = Field(default="not-started", max_length=20)
    subject: Optional[str] = Field(default=None, max_length=255)
    priority: str = Field(default="medium", max_length=20)
    user_id: str = Field(foreign_key="user.id", index=True, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)

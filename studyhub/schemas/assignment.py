"""Assignment request and response models."""
from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from studyhub.schemas._base import CamelModel

AssignmentStatus = Literal["not-started", "in-progress", "completed"]
AssignmentPriority = Literal["low", "medium", "high"]


class AssignmentCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: datetime
    status: AssignmentStatus = "not-started"
    subject: Optional[str] = None
    priority: AssignmentPriority = "medium"


class AssignmentUpdate(CamelModel):
    """Partial update; omitted fields are left untouched."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[AssignmentStatus] = None
    subject: Optional[str] = None
    priority: Optional[AssignmentPriority] = None


class AssignmentRead(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    due_date: datetime
    status: str
    subject: Optional[str] = None
    priority: str
    user_id: str
    created_at: datetime
    updated_at: datetime

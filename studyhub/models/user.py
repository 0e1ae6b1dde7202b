"""User SQLModel definition.

Users are created or refreshed by the sync endpoint with the identity the
external sign-in provider hands the client.
"""
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from studyhub.models._common import UTCDateTime, new_id, utcnow


class User(SQLModel, table=True):
    """Registered StudyHub user."""
    __tablename__ = "user"

    id: str = Field(default_factory=new_id, primary_key=True)
    clerk_id: str = Field(index=True, unique=True, nullable=False)
    email: str = Field(index=True, unique=True, nullable=False)
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    profile_picture: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)

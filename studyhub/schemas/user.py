"""User request and response models."""
from typing import Optional

from pydantic import Field

from studyhub.schemas._base import CamelModel


class UserSync(CamelModel):
    """Payload sent by the client after sign-in."""
    clerk_id: str = Field(min_length=1)
    email: str = Field(min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_picture: Optional[str] = None


class UserRead(CamelModel):
    id: str
    clerk_id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_picture: Optional[str] = None


class UserSession(CamelModel):
    """User plus a freshly signed bearer token."""
    user: UserRead
    token: str

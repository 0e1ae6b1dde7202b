"""AI assistant request and response models."""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from studyhub.schemas._base import CamelModel


class GenerateRequest(CamelModel):
    """Body of POST /api/ai/generate (JSON or form fields)."""
    assignment_id: str = Field(min_length=1)
    query: str = Field(min_length=1)


class GeneratedReply(BaseModel):
    """Assistant reply returned to the chat UI."""
    response: str
    timestamp: datetime
    # URLs of the files stored with the question
    attachments: List[str] = []


class HistoryMessage(BaseModel):
    """Single message in a conversation history."""
    text: str
    role: str
    timestamp: datetime

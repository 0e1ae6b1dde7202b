"""SQLModel table definitions."""
from studyhub.models.assignment import Assignment
from studyhub.models.conversation import Conversation, Message
from studyhub.models.user import User

__all__ = ["Assignment", "Conversation", "Message", "User"]

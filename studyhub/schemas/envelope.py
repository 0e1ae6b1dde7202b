"""Uniform response envelope shared by every route.

Success and failure are tagged by the literal ``success`` field so clients
can branch on one key instead of probing for shapes.
"""
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class SuccessEnvelope(BaseModel, Generic[T]):
    """Successful response."""
    success: Literal[True] = True
    message: str = "Operation successful"
    data: Optional[T] = None


class ErrorEnvelope(BaseModel):
    """Failed response."""
    success: Literal[False] = False
    message: str = "An error occurred"
    errors: Any = None


def ok(data: Any = None, message: str = "Operation successful") -> dict:
    """Build a success envelope body."""
    return {"success": True, "message": message, "data": data}

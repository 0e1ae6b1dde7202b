"""Assignment routes.

Provides:
- GET /api/assignments - List the user's assignments
- GET /api/assignments/{id} - Get one assignment
- POST /api/assignments - Create an assignment
- PUT /api/assignments/{id} - Update an assignment
- DELETE /api/assignments/{id} - Delete an assignment and its conversations
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from studyhub.core.deps import get_current_user, get_db
from studyhub.core.errors import NotFoundError
from studyhub.models.user import User
from studyhub.schemas.assignment import AssignmentCreate, AssignmentRead, AssignmentUpdate
from studyhub.schemas.envelope import SuccessEnvelope, ok
from studyhub.services import assignment_service

router = APIRouter(prefix="/api/assignments", tags=["assignments"])


@router.get("", response_model=SuccessEnvelope[List[AssignmentRead]])
def list_assignments(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> Dict[str, Any]:
    """List assignments for the authenticated user, soonest due first."""
    assignments = assignment_service.list_assignments(session, current_user.id)
    return ok(
        [AssignmentRead.model_validate(a) for a in assignments],
        "Assignments retrieved successfully",
    )


@router.get("/{assignment_id}", response_model=SuccessEnvelope[AssignmentRead])
def get_assignment(
    assignment_id: str,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Get one assignment.

    Raises:
        NotFoundError: 404 if not found or not owned
    """
    assignment = assignment_service.get_assignment(session, current_user.id, assignment_id)
    if not assignment:
        raise NotFoundError("Assignment not found")

    return ok(AssignmentRead.model_validate(assignment), "Assignment retrieved successfully")


@router.post(
    "",
    response_model=SuccessEnvelope[AssignmentRead],
    status_code=status.HTTP_201_CREATED,
)
def create_assignment(
    request: AssignmentCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Create an assignment owned by the authenticated user."""
    assignment = assignment_service.create_assignment(session, current_user.id, request)
    return ok(AssignmentRead.model_validate(assignment), "Assignment created successfully")


@router.put("/{assignment_id}", response_model=SuccessEnvelope[AssignmentRead])
def update_assignment(
    assignment_id: str,
    request: AssignmentUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Update an assignment; omitted fields are unchanged.

    Raises:
        NotFoundError: 404 if not found or not owned
    """
    assignment = assignment_service.update_assignment(
        session, current_user.id, assignment_id, request
    )
    if not assignment:
        raise NotFoundError("Assignment not found")

    return ok(AssignmentRead.model_validate(assignment), "Assignment updated successfully")


@router.delete("/{assignment_id}", response_model=SuccessEnvelope[None])
def delete_assignment(
    assignment_id: str,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Delete an assignment and its assistant conversations.

    Raises:
        NotFoundError: 404 if not found or not owned
    """
    if not assignment_service.delete_assignment(session, current_user.id, assignment_id):
        raise NotFoundError("Assignment not found")

    return ok(None, "Assignment deleted successfully")

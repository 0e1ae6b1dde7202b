"""AI assistant routes.

Provides:
- POST /api/ai/generate - Ask the assistant about an assignment
- GET /api/ai/history/{assignment_id} - Conversation history for an assignment
"""
import json
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from studyhub.config import Settings
from studyhub.core.deps import get_app_settings, get_current_user, get_db
from studyhub.core.errors import BadRequestError
from studyhub.models.user import User
from studyhub.schemas.assistant import GeneratedReply, GenerateRequest, HistoryMessage
from studyhub.schemas.envelope import SuccessEnvelope, ok
from studyhub.services.assistant_service import AssistantService
from studyhub.services.uploads import (
    UPLOADS_URL_PREFIX,
    AttachedFile,
    save_attachments,
    validate_attachments,
)

router = APIRouter(prefix="/api/ai", tags=["ai-assistant"])


def get_assistant_service(request: Request) -> AssistantService:
    """Assistant service attached to the running app."""
    return request.app.state.assistant_service


async def _read_generate_request(
    request: Request,
    settings: Settings,
) -> Tuple[Dict[str, Any], List[AttachedFile]]:
    """
    Read fields and files from a JSON or multipart body.

    File count and size limits are checked before any upload is read into
    memory; reads stop one byte past MAX_UPLOAD_BYTES.

    Returns:
        Tuple of (fields, attached_files)

    Raises:
        BadRequestError: If the body cannot be parsed, or an upload is
            over the count or size limit
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        fields = {
            key: value for key, value in form.multi_items() if not isinstance(value, UploadFile)
        }
        uploads = [item for item in form.getlist("files") if isinstance(item, UploadFile)]
        if len(uploads) > settings.MAX_UPLOAD_FILES:
            raise BadRequestError(f"At most {settings.MAX_UPLOAD_FILES} files may be attached")

        files = []
        for upload in uploads:
            name = upload.filename or "upload"
            if upload.size is not None and upload.size > settings.MAX_UPLOAD_BYTES:
                raise BadRequestError(f"File {name} exceeds the upload size limit")
            data = await upload.read(settings.MAX_UPLOAD_BYTES + 1)
            if len(data) > settings.MAX_UPLOAD_BYTES:
                raise BadRequestError(f"File {name} exceeds the upload size limit")
            files.append(
                AttachedFile(
                    filename=name,
                    content_type=upload.content_type or "application/octet-stream",
                    data=data,
                )
            )
        return fields, files

    body = await request.body()
    if not body:
        return {}, []
    try:
        fields = json.loads(body)
    except json.JSONDecodeError as e:
        raise BadRequestError("Request body is not valid JSON") from e
    if not isinstance(fields, dict):
        raise BadRequestError("Request body must be a JSON object")
    return fields, []


@router.post("/generate", response_model=SuccessEnvelope[GeneratedReply])
async def generate_response(
    request: Request,
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
    service: AssistantService = Depends(get_assistant_service),
) -> Dict[str, Any]:
    """
    Ask the assistant a question about an assignment.

    Accepts JSON ``{assignmentId, query}`` or multipart form fields with up
    to MAX_UPLOAD_FILES ``files``. Provider failures still answer 200 with
    the stored fallback reply. Attachments are written under the uploads
    directory and their URLs returned.

    Raises:
        BadRequestError: 400 if assignmentId or query is missing, or a file
            is rejected
        NotFoundError: 404 if the assignment does not exist
    """
    fields, files = await _read_generate_request(request, settings)

    try:
        payload = GenerateRequest.model_validate(fields)
    except ValidationError as e:
        raise BadRequestError(
            "Assignment ID and query are required",
            errors=[
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ],
        ) from e

    validate_attachments(files, settings)

    def _generate():
        # Session opened and closed on the worker thread
        with Session(request.app.state.engine) as session:
            return service.generate_response(
                session,
                payload.assignment_id,
                current_user.id,
                payload.query,
                files,
            )

    response_text, timestamp = await run_in_threadpool(_generate)

    # Only stored once the exchange went through
    stored = []
    if files:
        stored = await run_in_threadpool(save_attachments, files, settings.UPLOADS_DIR)

    return ok(
        GeneratedReply(
            response=response_text,
            timestamp=timestamp,
            attachments=[f"{UPLOADS_URL_PREFIX}/{path}" for path in stored],
        ),
        "Response generated successfully",
    )


@router.get("/history/{assignment_id}", response_model=SuccessEnvelope[List[HistoryMessage]])
def get_conversation_history(
    assignment_id: str,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
    service: AssistantService = Depends(get_assistant_service),
) -> Dict[str, Any]:
    """
    Get the conversation history for an assignment.

    Returns an empty list when the user has not talked to the assistant
    about this assignment yet.

    Raises:
        NotFoundError: 404 if the assignment does not exist
    """
    messages = service.get_conversation_history(session, assignment_id, current_user.id)

    return ok(
        [
            HistoryMessage(text=msg.text, role=msg.role, timestamp=msg.timestamp)
            for msg in messages
        ],
        "Conversation history retrieved successfully",
    )

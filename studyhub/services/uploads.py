"""Attachment handling for the AI assistant.

Files arrive with a chat query, are checked against the allowed types
and size limits, written under the uploads directory with a unique
name, and folded into the prompt as plain text where possible.
"""
import logging
import random
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

from studyhub.config import Settings
from studyhub.core.errors import BadRequestError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = re.compile(r"^\.(jpeg|jpg|png|gif|pdf|doc|docx|txt|md|rtf)$")
ALLOWED_MIME_TYPES = re.compile(r"jpeg|png|gif|pdf|msword|wordprocessingml|text/|markdown|rtf")
ASSISTANT_UPLOAD_SUBDIR = "ai-assistant"
UPLOADS_URL_PREFIX = "/uploads"


@dataclass(frozen=True)
class AttachedFile:
    """Uploaded document held in memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()

    @property
    def is_text(self) -> bool:
        """Whether the content is read into the prompt rather than named only."""
        content_type = self.content_type.lower()
        return (
            "text" in content_type
            or "pdf" in content_type
            or self.filename.lower().endswith(".md")
        )


def validate_attachments(files: Sequence[AttachedFile], settings: Settings) -> None:
    """
    Check count, size and type of uploaded files.

    Both the extension and the declared MIME type must name an allowed type.

    Raises:
        BadRequestError: On the first violation found
    """
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise BadRequestError(f"At most {settings.MAX_UPLOAD_FILES} files may be attached")

    for file in files:
        if len(file.data) > settings.MAX_UPLOAD_BYTES:
            raise BadRequestError(f"File {file.filename} exceeds the upload size limit")
        if not (ALLOWED_EXTENSIONS.match(file.extension) and ALLOWED_MIME_TYPES.search(file.content_type.lower())):
            raise BadRequestError(f"Unsupported file format: {file.filename}")


def unique_filename(extension: str, prefix: str = "files") -> str:
    """Timestamp plus random suffix, e.g. ``files-1700000000000-123456789.pdf``."""
    millis = int(time.time() * 1000)
    suffix = random.randint(0, 10**9 - 1)
    return f"{prefix}-{millis}-{suffix}{extension}"


def save_attachments(files: Iterable[AttachedFile], uploads_dir: Path) -> List[str]:
    """
    Write files under ``<uploads_dir>/ai-assistant``.

    Returns:
        Paths of the stored files, relative to ``uploads_dir``
    """
    target_dir = Path(uploads_dir) / ASSISTANT_UPLOAD_SUBDIR
    target_dir.mkdir(parents=True, exist_ok=True)

    stored = []
    for file in files:
        name = unique_filename(file.extension)
        (target_dir / name).write_bytes(file.data)
        stored.append(f"{ASSISTANT_UPLOAD_SUBDIR}/{name}")
        logger.debug(f"Stored attachment {file.filename} as {name}")
    return stored


def build_file_context(files: Iterable[AttachedFile]) -> str:
    """
    Fold attachments into a labelled text block for the prompt.

    Text-like files contribute their decoded content; anything else is
    listed by name only.
    """
    context = ""
    for file in files:
        if file.is_text:
            content = file.data.decode("utf-8", errors="replace")
            context += f"\nFile: {file.filename}\nContent: {content}\n"
        else:
            context += f"\nFile: {file.filename} (non-text file)\n"
    return context

# helpmate/services/attachments.py
"""
Local disk storage for ticket attachments.

Uploaded files are checked for size, extension and declared media type,
written under the upload directory with a generated name, and described by
an ``Attachment`` whose ``path`` is the URL the file is served back from.
"""
import logging
import os
import secrets
import time
from pathlib import Path
from typing import Set
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool
from helpmate.errors import InvalidInput
from helpmate.models import Attachment

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS: Set[str] = {
    ".jpeg", ".jpg", ".png", ".gif", ".pdf", ".doc", ".docx", ".txt"
}

ALLOWED_MEDIA_TYPES: Set[str] = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
}

URL_PREFIX = "/uploads"


class AttachmentStore:
    def __init__(self, upload_dir: str, max_bytes: int):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    def _validate(self, original_name: str, media_type: str | None, content: bytes) -> str:
        ext = os.path.splitext(original_name)[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise InvalidInput("Only images and documents are allowed")
        if (media_type or "").split(";")[0].strip().lower() not in ALLOWED_MEDIA_TYPES:
            raise InvalidInput("Only images and documents are allowed")
        if len(content) == 0:
            raise InvalidInput("Empty file not allowed")
        if len(content) > self.max_bytes:
            raise InvalidInput(f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB")
        return ext

    def _write(self, filename: str, content: bytes):
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / filename).write_bytes(content)

    async def save(self, file: UploadFile) -> Attachment:
        original_name = os.path.basename(file.filename or "")
        # read one byte past the limit so oversized uploads are caught without loading them whole
        content = await file.read(self.max_bytes + 1)
        ext = self._validate(original_name, file.content_type, content)

        filename = f"attachment-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"
        await run_in_threadpool(self._write, filename, content)
        logger.info("Stored attachment %s (%d bytes)", filename, len(content))

        return Attachment(
            filename=filename,
            original_name=original_name,
            media_type=file.content_type,
            size=len(content),
            path=f"{URL_PREFIX}/{filename}",
        )

    def discard(self, attachment: Attachment):
        """Remove a stored file whose ticket never got created."""
        (self.upload_dir / attachment.filename).unlink(missing_ok=True)

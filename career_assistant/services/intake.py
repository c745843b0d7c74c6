"""
Upload Intake - gate on declared metadata and size, then stage to disk.

Accepted:
- document type: cv, cover-letter
- media type: PDF, DOCX (exact MIME string)
- max size: 100MB (configurable)

Nothing is written unless every metadata check passes. Intake never
looks inside the file.
"""

import os
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Optional

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from career_assistant.core.errors import DocumentValidationError, FileTooLarge, UnsupportedMediaType
from career_assistant.core.logging import get_logger
from career_assistant.schemas.schemas import DocumentKind

logger = get_logger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_MIME_TYPES = {PDF_MIME, DOCX_MIME}

CHUNK_SIZE = 1024 * 1024


@dataclass
class StagedUpload:
    """A file written to transient storage, owned by one request."""
    path: str
    content_type: str
    filename: str
    size: int
    kind: DocumentKind
    _released: bool = field(default=False, repr=False)

    @property
    def released(self) -> bool:
        return self._released

    def release(self):
        """Remove the staged file. Safe to call more than once; never raises."""
        if self._released:
            return
        self._released = True
        try:
            os.remove(self.path)
        except OSError as e:
            logger.debug("Could not remove staged file %s: %s", self.path, e)


def validate_document_type(doc_type: Optional[str]) -> DocumentKind:
    try:
        return DocumentKind(doc_type)
    except ValueError:
        raise DocumentValidationError("Invalid document type") from None


def _remove_quietly(path: str):
    try:
        os.remove(path)
    except OSError:
        pass


async def stage_upload(
    file: Optional[UploadFile],
    doc_type: Optional[str],
    upload_dir: str,
    max_bytes: int
) -> StagedUpload:
    """
    Validate the upload and write it to `upload_dir` under a generated name.

    Raises:
        DocumentValidationError: no file, or type not cv / cover-letter
        UnsupportedMediaType: declared MIME type not PDF or DOCX
        FileTooLarge: body exceeds max_bytes
    """
    if file is None or not file.filename:
        raise DocumentValidationError("No file uploaded")

    kind = validate_document_type(doc_type)

    if file.content_type not in ALLOWED_MIME_TYPES:
        logger.info("Rejected upload %s with media type %s", file.filename, file.content_type)
        raise UnsupportedMediaType()

    if file.size is not None and file.size > max_bytes:
        raise FileTooLarge()

    await run_in_threadpool(os.makedirs, upload_dir, exist_ok=True)
    path = os.path.join(upload_dir, uuid.uuid4().hex)

    size = 0
    out = await run_in_threadpool(open, path, "wb")
    try:
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > max_bytes:
                raise FileTooLarge()
            await run_in_threadpool(out.write, chunk)
    except BaseException:
        out.close()
        _remove_quietly(path)
        raise
    out.close()

    return StagedUpload(
        path=path,
        content_type=file.content_type,
        filename=file.filename,
        size=size,
        kind=kind
    )


@asynccontextmanager
async def staged_upload(
    file: Optional[UploadFile],
    doc_type: Optional[str],
    upload_dir: str,
    max_bytes: int
):
    """
    Stage an upload for the duration of the block.

    The staged file is released on every exit path, including
    cancellation of the request.
    """
    staged = await stage_upload(file, doc_type, upload_dir, max_bytes)
    try:
        yield staged
    finally:
        staged.release()

"""
Document Parser - Extract text from staged CV / cover letter files.

Supported formats (by declared media type):
- PDF using PyPDF2
- Word (.docx) using python-docx

The staged file is always released once parsing finishes, whether it
succeeded or not.
"""

import io

from docx import Document
from fastapi.concurrency import run_in_threadpool
from PyPDF2 import PdfReader

from career_assistant.core.errors import ParseFailure, UnsupportedFormat
from career_assistant.core.logging import get_logger
from career_assistant.services.intake import DOCX_MIME, PDF_MIME, StagedUpload

logger = get_logger(__name__)


def extract_from_pdf(content: bytes) -> str:
    """Extract text from PDF bytes, page by page in reading order."""
    reader = PdfReader(io.BytesIO(content))
    text_parts = []
    for page in reader.pages:
        page_text = page.extract_text()
        if page_text:
            text_parts.append(page_text)
    return '\n'.join(text_parts)


def extract_from_docx(content: bytes) -> str:
    """Extract raw text from DOCX bytes, discarding styling."""
    doc = Document(io.BytesIO(content))
    text_parts = []

    # Extract paragraphs
    for para in doc.paragraphs:
        if para.text.strip():
            text_parts.append(para.text)

    # Extract tables
    for table in doc.tables:
        for row in table.rows:
            row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if row_text:
                text_parts.append(' | '.join(row_text))

    return '\n'.join(text_parts)


EXTRACTORS = {
    PDF_MIME: extract_from_pdf,
    DOCX_MIME: extract_from_docx,
}


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def parse_bytes(content: bytes, content_type: str) -> str:
    """
    Extract plain text from file bytes by declared media type.

    Raises:
        UnsupportedFormat: no extractor for content_type
        ParseFailure: the extractor could not read the content
    """
    extractor = EXTRACTORS.get(content_type)
    if extractor is None:
        raise UnsupportedFormat()
    try:
        return extractor(content)
    except Exception as e:
        raise ParseFailure(f"Failed to parse document: {e}") from e


async def parse_document(staged: StagedUpload) -> str:
    """
    Parse a staged upload into plain text.

    The staged file is released exactly once on the way out; a failed
    cleanup never replaces the parse result or error.
    """
    try:
        try:
            content = await run_in_threadpool(_read_file, staged.path)
        except OSError as e:
            raise ParseFailure(f"Failed to parse document: {e}") from e
        return await run_in_threadpool(parse_bytes, content, staged.content_type)
    except (ParseFailure, UnsupportedFormat) as e:
        logger.warning("Parsing %s failed: %s", staged.filename, e.message)
        raise
    finally:
        staged.release()

"""
Error taxonomy for the document upload path.

Every error here is surfaced to the caller. Upload errors carry the
terminal failure state the upload ended in. Extraction and profile
reconciliation failures are not part of this module: they are absorbed
by the pipeline and only logged.
"""

from career_assistant.schemas.schemas import UploadState


class PipelineError(Exception):
    """Base error rendered as {"message": ...} with `status_code`."""

    status_code = 500
    default_message = "Internal server error"
    state = None

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(PipelineError):
    status_code = 401
    default_message = "Invalid token"


class DocumentNotFound(PipelineError):
    status_code = 404
    default_message = "Document not found or unauthorized"


class DocumentValidationError(PipelineError):
    status_code = 400
    default_message = "Invalid document type"
    state = UploadState.intake_rejected


class UnsupportedMediaType(PipelineError):
    status_code = 415
    default_message = "Only PDF and DOCX files are allowed"
    state = UploadState.intake_rejected


class FileTooLarge(PipelineError):
    status_code = 413
    default_message = "File too large"
    state = UploadState.intake_rejected


class UnsupportedFormat(PipelineError):
    status_code = 422
    default_message = "Unsupported file type"
    state = UploadState.parse_failed


class ParseFailure(PipelineError):
    status_code = 422
    default_message = "Failed to parse document"
    state = UploadState.parse_failed


class PersistenceFailure(PipelineError):
    status_code = 500
    default_message = "Failed to save document"
    state = UploadState.persistence_failed

"""
Document Routes

POST /documents/upload - Upload CV or cover letter (PDF/DOCX)
GET /documents - List my documents
DELETE /documents/{document_id} - Delete one of my documents
"""

from fastapi import APIRouter, Depends, UploadFile, File, Form
from fastapi.concurrency import run_in_threadpool
from typing import List, Optional

from career_assistant.api.dependencies import get_store, get_upload_pipeline
from career_assistant.core.auth import get_current_user
from career_assistant.core.config import get_settings, Settings
from career_assistant.core.errors import DocumentNotFound
from career_assistant.services.intake import staged_upload
from career_assistant.services.store import Store
from career_assistant.services.upload_pipeline import DocumentUploadPipeline
from career_assistant.schemas.schemas import DocumentUploadResponse, DocumentResponse, MessageResponse

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.post("/upload", response_model=DocumentUploadResponse)
async def upload_document(
    document: Optional[UploadFile] = File(None, description="CV or cover letter (PDF or DOCX)"),
    type: Optional[str] = Form(None, description="cv or cover-letter"),
    user: dict = Depends(get_current_user),
    pipeline: DocumentUploadPipeline = Depends(get_upload_pipeline),
    settings: Settings = Depends(get_settings)
):
    """
    Upload a document and extract its text.

    Supported formats: PDF, DOCX (max 100MB)

    Process:
    1. Validate type and media type, stage the file
    2. Extract text from file
    3. Store the document
    4. For CVs, extract profile fields with AI and merge them into the profile
    """
    async with staged_upload(document, type, settings.upload_dir, settings.max_upload_bytes) as staged:
        outcome = await pipeline.run(user, staged)

    return DocumentUploadResponse(
        id=outcome.document.id,
        filename=outcome.document.filename,
        type=outcome.document.type
    )


@router.get("", response_model=List[DocumentResponse])
async def list_documents(user: dict = Depends(get_current_user), store: Store = Depends(get_store)):
    """Get all documents uploaded by current user, newest first."""
    documents = await run_in_threadpool(store.list_documents, user["user_id"])
    return [
        DocumentResponse(
            id=d.id, filename=d.filename, type=d.type,
            content=d.content, created_at=d.created_at
        ) for d in documents
    ]


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: str,
    user: dict = Depends(get_current_user),
    store: Store = Depends(get_store)
):
    """Delete a document. Only the owner can delete it."""
    deleted = await run_in_threadpool(store.delete_document, document_id, user["user_id"])
    if not deleted:
        raise DocumentNotFound()

    return MessageResponse(message="Document deleted successfully")

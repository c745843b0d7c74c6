"""
Service dependencies injected into routes.

Routes never construct their collaborators; tests replace these with
fakes through app.dependency_overrides.
"""

from fastapi import Depends

from career_assistant.services.llm_client import LLMClient, get_llm_client
from career_assistant.services.store import Store
from career_assistant.services.upload_pipeline import DocumentUploadPipeline

_store: Store = None


def get_store() -> Store:
    """Get or create the database store (singleton pattern)"""
    global _store
    if _store is None:
        from career_assistant.services.database_store import DatabaseStore
        _store = DatabaseStore()
    return _store


def get_llm() -> LLMClient:
    return get_llm_client()


def get_upload_pipeline(
    store: Store = Depends(get_store),
    llm: LLMClient = Depends(get_llm)
) -> DocumentUploadPipeline:
    return DocumentUploadPipeline(store, llm)

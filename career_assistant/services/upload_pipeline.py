"""
Upload Pipeline - from staged file to stored document and enriched profile.

Mandatory path (errors propagate to the caller):
1. Parse the staged file to plain text
2. Store the document

Best-effort path (CV only, errors are logged and absorbed):
3. Extract profile fields with the LLM
4. Reconcile them with the stored profile
5. Upsert the profile

A stored document is never rolled back because enrichment failed.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from career_assistant.core.errors import PersistenceFailure
from career_assistant.core.logging import get_logger
from career_assistant.schemas.schemas import DocumentKind, DocumentRecord, ProfileRecord, UploadState
from career_assistant.services.document_parser import parse_document
from career_assistant.services.intake import StagedUpload
from career_assistant.services.llm_client import LLMClient
from career_assistant.services.profile_extractor import extract_profile
from career_assistant.services.profile_reconciler import has_profile_data, reconcile
from career_assistant.services.store import Store

logger = get_logger(__name__)


@dataclass
class UploadOutcome:
    document: DocumentRecord
    state: UploadState
    profile: Optional[ProfileRecord] = None


class DocumentUploadPipeline:
    """
    Runs one upload. Holds no per-request state, so a single instance
    can serve concurrent requests.
    """

    def __init__(self, store: Store, llm: LLMClient):
        self.store = store
        self.llm = llm

    async def run(self, user: dict, staged: StagedUpload) -> UploadOutcome:
        """
        Args:
            user: {"user_id", "identity_id", "email"} of the authenticated caller
            staged: file accepted by intake; released by the parser

        Raises:
            ParseFailure / UnsupportedFormat: text could not be extracted
            PersistenceFailure: the document could not be stored
        """
        content = await parse_document(staged)

        document = await self._store_document(user, staged, content)
        outcome = UploadOutcome(document=document, state=UploadState.stored)

        if document.type == DocumentKind.cv:
            profile_state, profile = await self._enrich_profile(user, content)
            if profile_state is not None:
                outcome.state = profile_state
            outcome.profile = profile

        return outcome

    async def _store_document(self, user: dict, staged: StagedUpload, content: str) -> DocumentRecord:
        record = DocumentRecord(
            user_id=user["user_id"],
            filename=staged.filename,
            content=content,
            type=staged.kind,
            session_id=user["identity_id"]
        )
        try:
            return await run_in_threadpool(self.store.insert_document, record)
        except Exception as e:
            logger.exception("Database error while storing %s", staged.filename)
            raise PersistenceFailure() from e

    async def _enrich_profile(self, user: dict, cv_text: str):
        """
        Returns (furthest state reached or None, profile written or None).
        Never raises.
        """
        extracted = await extract_profile(self.llm, cv_text)
        if not has_profile_data(extracted):
            logger.info("No profile data extracted for user %s", user["user_id"])
            return None, None

        try:
            existing = await run_in_threadpool(self.store.get_profile, user["user_id"])
            merged = reconcile(extracted, existing, user["user_id"], user["identity_id"])
            await run_in_threadpool(self.store.upsert_profile, merged)
        except Exception:
            logger.exception("Error updating profile for user %s", user["user_id"])
            return UploadState.extracted, None

        return UploadState.reconciled, merged

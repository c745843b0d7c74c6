"""
Store - the persistence gateway consumed by the upload pipeline.

Every operation is keyed by the local user id; implementations never
return or modify another user's records. Operations are synchronous and
single-row atomic; async callers run them through the threadpool.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from career_assistant.schemas.schemas import DocumentRecord, ProfileRecord


class Store(ABC):

    @abstractmethod
    def find_or_create_local_user(self, identity: dict) -> int:
        """
        Resolve the local user id for an authenticated identity.

        `identity` is {"id", "email", "first_name", "last_name"}; a new
        user is seeded with empty first/last name when they are absent.
        """

    @abstractmethod
    def insert_document(self, record: DocumentRecord) -> DocumentRecord:
        """Persist a document and return it with its generated id."""

    @abstractmethod
    def list_documents(self, user_id: int) -> List[DocumentRecord]:
        """All documents owned by the user, newest first."""

    @abstractmethod
    def delete_document(self, document_id: str, user_id: int) -> bool:
        """Delete a document only if the user owns it. Returns True if deleted."""

    @abstractmethod
    def get_profile(self, user_id: int) -> Optional[ProfileRecord]:
        pass

    @abstractmethod
    def upsert_profile(self, record: ProfileRecord) -> ProfileRecord:
        """Insert or fully replace the profile, conflict key user_id."""

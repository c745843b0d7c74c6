"""
Database Store - PostgreSQL + MongoDB implementation of the Store.

PostgreSQL holds structured, keyed data:
1. users     - local user per identity-provider subject
2. profiles  - at most one per user (UNIQUE user_id, upserted)

MongoDB holds the uploaded documents:
1. documents - extracted text of each upload, scoped by user_id
"""

from typing import List, Optional
from bson import ObjectId
from pymongo.collection import Collection
from sqlalchemy import text

from career_assistant.db.mongodb import get_collection, COLLECTIONS
from career_assistant.db.postgres import get_db_session
from career_assistant.schemas.schemas import DocumentRecord, ProfileRecord
from career_assistant.services.store import Store


PROFILE_COLUMNS = ["user_id", "session_id", "name", "email", "phone",
                   "position", "skills", "experience", "languages"]


def document_from_mongo(doc: dict) -> DocumentRecord:
    """Convert MongoDB document to a DocumentRecord."""
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return DocumentRecord(**doc)


class DatabaseStore(Store):

    def __init__(self, documents: Collection = None):
        self.documents: Collection = documents if documents is not None else get_collection(COLLECTIONS["documents"])

    # ============================================================
    # USERS (PostgreSQL)
    # ============================================================

    def find_or_create_local_user(self, identity: dict) -> int:
        with get_db_session() as db:
            result = db.execute(
                text("SELECT user_id FROM users WHERE username = :username"),
                {"username": identity["id"]}
            )
            row = result.fetchone()
            if row:
                return row[0]

            # Concurrent first requests for one identity race here
            result = db.execute(
                text("""
                    INSERT INTO users (username, email, first_name, last_name, identity_provider_id)
                    VALUES (:username, :email, :first_name, :last_name, :username)
                    ON CONFLICT (username) DO UPDATE SET email = EXCLUDED.email
                    RETURNING user_id
                """),
                {
                    "username": identity["id"],
                    "email": identity.get("email"),
                    "first_name": identity.get("first_name") or "",
                    "last_name": identity.get("last_name") or ""
                }
            )
            return result.fetchone()[0]

    # ============================================================
    # DOCUMENTS (MongoDB)
    # ============================================================

    def insert_document(self, record: DocumentRecord) -> DocumentRecord:
        doc = record.model_dump(exclude={"id"})
        result = self.documents.insert_one(doc)
        return record.model_copy(update={"id": str(result.inserted_id)})

    def list_documents(self, user_id: int) -> List[DocumentRecord]:
        cursor = self.documents.find({"user_id": user_id}).sort("created_at", -1)
        return [document_from_mongo(doc) for doc in cursor]

    def delete_document(self, document_id: str, user_id: int) -> bool:
        if not ObjectId.is_valid(document_id):
            return False
        result = self.documents.delete_one({"_id": ObjectId(document_id), "user_id": user_id})
        return result.deleted_count > 0

    # ============================================================
    # PROFILES (PostgreSQL)
    # ============================================================

    def get_profile(self, user_id: int) -> Optional[ProfileRecord]:
        with get_db_session() as db:
            result = db.execute(
                text(f"SELECT {', '.join(PROFILE_COLUMNS)} FROM profiles WHERE user_id = :id"),
                {"id": user_id}
            )
            row = result.fetchone()

        if not row:
            return None
        values = dict(zip(PROFILE_COLUMNS, row))
        return ProfileRecord(**{k: ("" if v is None else v) for k, v in values.items()})

    def upsert_profile(self, record: ProfileRecord) -> ProfileRecord:
        updates = [f"{col} = EXCLUDED.{col}" for col in PROFILE_COLUMNS if col != "user_id"]
        with get_db_session() as db:
            db.execute(
                text(f"""
                    INSERT INTO profiles ({', '.join(PROFILE_COLUMNS)})
                    VALUES ({', '.join(':' + col for col in PROFILE_COLUMNS)})
                    ON CONFLICT (user_id) DO UPDATE
                    SET {', '.join(updates)}, updated_at = CURRENT_TIMESTAMP
                """),
                record.model_dump()
            )
        return record

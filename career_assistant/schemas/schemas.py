"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity,
together with the transient models passed between pipeline stages.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Any
from datetime import datetime
from enum import Enum


# Values an inference response may use to mean "not found"
PLACEHOLDER_VALUES = {"", "undefined", "null", "none", "n/a"}

NOT_SPECIFIED = "Not specified"


def _is_placeholder(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() in PLACEHOLDER_VALUES)


# ============================================================
# ENUMS
# ============================================================

class DocumentKind(str, Enum):
    cv = "cv"
    cover_letter = "cover-letter"


class UploadState(str, Enum):
    """Furthest state an upload reached. Failure states live on the raised errors."""
    stored = "stored"
    extracted = "extracted"
    reconciled = "reconciled"
    intake_rejected = "intake_rejected"
    parse_failed = "parse_failed"
    persistence_failed = "persistence_failed"


# ============================================================
# EXTRACTED PROFILE (transient, never stored directly)
# ============================================================

class LanguageEntry(BaseModel):
    language: str
    proficiency: str = NOT_SPECIFIED

    @field_validator("proficiency", mode="before")
    @classmethod
    def default_proficiency(cls, value: Any) -> str:
        if _is_placeholder(value):
            return NOT_SPECIFIED
        return str(value).strip()


class ExtractedProfile(BaseModel):
    """
    Profile fields derived from CV text by the inference capability.

    Absent values are always None: empty strings and placeholder
    strings such as "undefined" are normalized away on construction.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    skills: Optional[str] = None
    experience: Optional[str] = None
    languages: Optional[List[LanguageEntry]] = None

    @field_validator("name", "email", "phone", "position", "skills", "experience", mode="before")
    @classmethod
    def normalize_scalar(cls, value: Any) -> Optional[str]:
        if isinstance(value, list):
            value = ", ".join(str(v).strip() for v in value if not _is_placeholder(v))
        if _is_placeholder(value):
            return None
        return str(value).strip()

    @field_validator("languages", mode="before")
    @classmethod
    def normalize_languages(cls, value: Any) -> Optional[list]:
        if not isinstance(value, list):
            return None
        # Malformed entries are dropped so the rest of the profile survives
        entries = [
            entry for entry in value
            if isinstance(entry, dict)
            and isinstance(entry.get("language"), str)
            and not _is_placeholder(entry["language"])
        ]
        return entries or None


# ============================================================
# PERSISTED RECORDS
# ============================================================

class ProfileRecord(BaseModel):
    user_id: int
    session_id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    position: str = ""
    skills: str = ""
    experience: str = ""
    languages: str = ""


class DocumentRecord(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: Optional[str] = None
    user_id: int
    filename: str
    content: str
    type: DocumentKind
    session_id: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    skills: Optional[str] = None
    experience: Optional[str] = None
    languages: Optional[str] = None


# ============================================================
# DOCUMENT SCHEMAS
# ============================================================

class DocumentUploadResponse(BaseModel):
    id: str
    filename: str
    type: DocumentKind
    message: str = "Document uploaded successfully"


class DocumentResponse(BaseModel):
    id: str
    filename: str
    type: DocumentKind
    content: str
    created_at: datetime


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

"""
Profile Reconciler - merge extracted CV fields over the stored profile.

Precedence per field: extracted value if present, else stored value,
else empty string. Ownership fields (user_id, session_id) always come
from the authenticated caller, never from extracted text.
"""

import json
from typing import List, Optional

from career_assistant.schemas.schemas import ExtractedProfile, LanguageEntry, ProfileRecord

SCALAR_FIELDS = ["name", "email", "phone", "position", "skills", "experience"]


def has_profile_data(extracted: Optional[ExtractedProfile]) -> bool:
    """True if at least one of the seven extracted fields has a value."""
    if extracted is None:
        return False
    return any(getattr(extracted, field) for field in SCALAR_FIELDS) or bool(extracted.languages)


def serialize_languages(languages: List[LanguageEntry]) -> str:
    """Storage form of the languages list: a JSON array of objects."""
    return json.dumps([entry.model_dump() for entry in languages], ensure_ascii=False)


def reconcile(
    extracted: ExtractedProfile,
    existing: Optional[ProfileRecord],
    user_id: int,
    session_id: str
) -> ProfileRecord:
    merged = {"user_id": user_id, "session_id": session_id}

    for field in SCALAR_FIELDS:
        merged[field] = getattr(extracted, field) or (getattr(existing, field) if existing else "") or ""

    if extracted.languages:
        merged["languages"] = serialize_languages(extracted.languages)
    else:
        merged["languages"] = (existing.languages if existing else "") or ""

    return ProfileRecord(**merged)

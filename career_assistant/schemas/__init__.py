"""
Schemas module - Request/Response schemas and pipeline models.

Difference from records:
- Records: what the store persists (DocumentRecord, ProfileRecord)
- Schemas: API contract (what client sends/receives)
"""

from career_assistant.schemas.schemas import (
    DocumentKind,
    DocumentRecord,
    ExtractedProfile,
    LanguageEntry,
    ProfileRecord,
)

__all__ = [
    "DocumentKind",
    "DocumentRecord",
    "ExtractedProfile",
    "LanguageEntry",
    "ProfileRecord",
]

"""
Career Assistant
Document ingestion and CV profile extraction backend.

Architecture:
- PostgreSQL: Structured data (users, profiles)
- MongoDB: Uploaded documents (extracted text)
- LLM: CV profile extraction only (best effort, never blocks an upload)
"""

__version__ = "1.0.0"

import io
import itertools
import json
import os

import pytest
from bson import ObjectId
from docx import Document
from fastapi.testclient import TestClient
from PyPDF2 import PdfWriter

from career_assistant.api.dependencies import get_llm, get_store
from career_assistant.core.auth import get_current_identity
from career_assistant.core.config import Settings, get_settings
from career_assistant.main import app
from career_assistant.services.intake import StagedUpload
from career_assistant.services.store import Store


class InMemoryStore(Store):
    """Store fake keeping records in dicts. Set `fail_on` to make an operation raise."""

    def __init__(self):
        self.users = {}
        self.documents = {}
        self.profiles = {}
        self.fail_on = set()
        self._user_ids = itertools.count(1)

    def _check(self, operation):
        if operation in self.fail_on:
            raise RuntimeError(f"{operation} failed")

    def find_or_create_local_user(self, identity):
        self._check("find_or_create_local_user")
        if identity["id"] not in self.users:
            self.users[identity["id"]] = {
                "user_id": next(self._user_ids),
                "email": identity.get("email"),
                "first_name": identity.get("first_name") or "",
                "last_name": identity.get("last_name") or "",
            }
        return self.users[identity["id"]]["user_id"]

    def insert_document(self, record):
        self._check("insert_document")
        stored = record.model_copy(update={"id": str(ObjectId())})
        self.documents[stored.id] = stored
        return stored

    def list_documents(self, user_id):
        docs = [d for d in self.documents.values() if d.user_id == user_id]
        return sorted(docs, key=lambda d: d.created_at, reverse=True)

    def delete_document(self, document_id, user_id):
        doc = self.documents.get(document_id)
        if doc is None or doc.user_id != user_id:
            return False
        del self.documents[document_id]
        return True

    def get_profile(self, user_id):
        self._check("get_profile")
        return self.profiles.get(user_id)

    def upsert_profile(self, record):
        self._check("upsert_profile")
        self.profiles[record.user_id] = record
        return record


class ScriptedLLM:
    """LLM fake returning a fixed response (or raising it if it is an exception)."""

    def __init__(self, response=None):
        self.response = response
        self.calls = []

    async def complete(self, system_prompt, user_prompt, temperature=0.1, max_tokens=500):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def profile_json(**fields):
    payload = {
        "name": None, "email": None, "phone": None, "position": None,
        "skills": None, "experience": None, "languages": None,
    }
    payload.update(fields)
    return json.dumps(payload)


def make_docx(*paragraphs, table=None) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table:
        t = doc.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                t.cell(r, c).text = value
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def make_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def llm():
    return ScriptedLLM(profile_json(name="Ana"))


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def stage_file(upload_dir):
    """Write bytes to the upload dir and wrap them as a StagedUpload."""
    def _stage(content: bytes, content_type: str, kind="cv", filename="cv.docx"):
        path = upload_dir / f"staged-{len(os.listdir(upload_dir))}"
        path.write_bytes(content)
        return StagedUpload(
            path=str(path), content_type=content_type,
            filename=filename, size=len(content), kind=kind
        )
    return _stage


@pytest.fixture
def identity():
    return {"id": "identity-1", "email": "ana@example.com", "first_name": "", "last_name": ""}


@pytest.fixture
def settings(upload_dir):
    return Settings(
        upload_dir=str(upload_dir),
        max_upload_size_mb=1,
        jwt_secret_key="test-secret",
        _env_file=None,
    )


@pytest.fixture
def client(store, llm, settings, identity):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_llm] = lambda: llm
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_current_identity] = lambda: identity
    yield TestClient(app)
    app.dependency_overrides.clear()

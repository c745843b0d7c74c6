import os

import pytest

from career_assistant.core.errors import ParseFailure, PersistenceFailure
from career_assistant.schemas.schemas import ProfileRecord
from career_assistant.services.intake import DOCX_MIME, PDF_MIME
from career_assistant.services.upload_pipeline import DocumentUploadPipeline, UploadState

from conftest import ScriptedLLM, make_docx, make_pdf, profile_json

pytestmark = pytest.mark.anyio

USER = {"user_id": 1, "identity_id": "identity-1", "email": "ana@example.com"}


async def test_cover_letter_is_stored_without_extraction(store, stage_file):
    llm = ScriptedLLM(profile_json(name="Ana"))
    staged = stage_file(make_pdf(), PDF_MIME, kind="cover-letter", filename="letter.pdf")

    outcome = await DocumentUploadPipeline(store, llm).run(USER, staged)

    assert outcome.state == UploadState.stored
    assert outcome.document.type == "cover-letter"
    assert store.documents[outcome.document.id].filename == "letter.pdf"
    assert llm.calls == []
    assert store.profiles == {}
    assert not os.path.exists(staged.path)


async def test_cv_creates_profile(store, stage_file):
    llm = ScriptedLLM(profile_json(name="Ana"))
    staged = stage_file(make_docx("Ana", "Engineer"), DOCX_MIME)

    outcome = await DocumentUploadPipeline(store, llm).run(USER, staged)

    stored = store.documents[outcome.document.id]
    assert stored.content == "Ana\nEngineer"
    assert stored.type == "cv"
    assert stored.user_id == 1
    assert stored.session_id == "identity-1"
    assert outcome.state == UploadState.reconciled
    assert store.profiles[1] == ProfileRecord(user_id=1, session_id="identity-1", name="Ana")
    assert llm.calls[0]["user_prompt"].rstrip().endswith("Ana\nEngineer")


async def test_cv_with_malformed_language_still_updates_profile(store, stage_file):
    llm = ScriptedLLM(profile_json(name="Ana", languages=[{"language": ["English"]}]))
    staged = stage_file(make_docx("Ana"), DOCX_MIME)

    outcome = await DocumentUploadPipeline(store, llm).run(USER, staged)

    assert outcome.state == UploadState.reconciled
    assert store.profiles[1].name == "Ana"
    assert store.profiles[1].languages == ""


async def test_cv_keeps_stored_email(store, stage_file):
    store.profiles[1] = ProfileRecord(user_id=1, session_id="identity-1", name="Old", email="old@x.com")
    staged = stage_file(make_docx("Ana"), DOCX_MIME)

    await DocumentUploadPipeline(store, ScriptedLLM(profile_json(name="Ana"))).run(USER, staged)

    assert store.profiles[1].name == "Ana"
    assert store.profiles[1].email == "old@x.com"


@pytest.mark.parametrize("response", ["not json", "", None, profile_json(), RuntimeError("timeout")])
async def test_unusable_extraction_still_stores_document(store, stage_file, response):
    staged = stage_file(make_docx("Ana"), DOCX_MIME)

    outcome = await DocumentUploadPipeline(store, ScriptedLLM(response)).run(USER, staged)

    assert outcome.state == UploadState.stored
    assert outcome.profile is None
    assert outcome.document.id in store.documents
    assert store.profiles == {}


@pytest.mark.parametrize("operation", ["get_profile", "upsert_profile"])
async def test_profile_store_failure_is_absorbed(store, stage_file, operation):
    store.fail_on.add(operation)
    staged = stage_file(make_docx("Ana"), DOCX_MIME)

    outcome = await DocumentUploadPipeline(store, ScriptedLLM(profile_json(name="Ana"))).run(USER, staged)

    assert outcome.state == UploadState.extracted
    assert outcome.profile is None
    assert outcome.document.id in store.documents


async def test_document_store_failure_is_fatal(store, stage_file):
    store.fail_on.add("insert_document")
    llm = ScriptedLLM(profile_json(name="Ana"))
    staged = stage_file(make_docx("Ana"), DOCX_MIME)

    with pytest.raises(PersistenceFailure):
        await DocumentUploadPipeline(store, llm).run(USER, staged)

    assert staged.released
    assert llm.calls == []
    assert store.profiles == {}


async def test_parse_failure_stores_nothing(store, stage_file):
    llm = ScriptedLLM(profile_json(name="Ana"))
    staged = stage_file(b"garbage", DOCX_MIME)

    with pytest.raises(ParseFailure):
        await DocumentUploadPipeline(store, llm).run(USER, staged)

    assert staged.released
    assert store.documents == {}
    assert llm.calls == []


async def test_failures_carry_terminal_state(store, stage_file):
    llm = ScriptedLLM(profile_json(name="Ana"))

    with pytest.raises(ParseFailure) as parse_error:
        await DocumentUploadPipeline(store, llm).run(USER, stage_file(b"garbage", DOCX_MIME))
    assert parse_error.value.state == UploadState.parse_failed

    store.fail_on.add("insert_document")
    with pytest.raises(PersistenceFailure) as store_error:
        await DocumentUploadPipeline(store, llm).run(USER, stage_file(make_docx("Ana"), DOCX_MIME))
    assert store_error.value.state == UploadState.persistence_failed

import pytest
from jose import jwt

from career_assistant.core.auth import decode_token, get_current_identity, identity_from_claims
from career_assistant.main import app

from conftest import make_docx


@pytest.fixture
def unauthenticated_client(client):
    app.dependency_overrides.pop(get_current_identity)
    return client


def token(settings, **claims):
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def test_missing_token_is_401_without_side_effects(unauthenticated_client, store, upload_dir):
    response = unauthenticated_client.post(
        "/api/documents/upload",
        files={"document": ("cv.docx", make_docx("Ana"), "application/octet-stream")},
        data={"type": "cv"},
    )

    assert response.status_code == 401
    assert response.json() == {"message": "No token provided"}
    assert store.users == {}
    assert store.documents == {}


def test_token_signed_with_other_key_is_401(unauthenticated_client, settings, store):
    bad = jwt.encode({"sub": "identity-1"}, "other-secret", algorithm="HS256")

    response = unauthenticated_client.get("/api/profile", headers={"Authorization": f"Bearer {bad}"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid token"}
    assert store.users == {}


def test_valid_token_creates_local_user(unauthenticated_client, settings, store):
    claims = {"sub": "identity-9", "email": "ana@example.com", "user_metadata": {"first_name": "Ana"}}

    response = unauthenticated_client.get(
        "/api/profile", headers={"Authorization": f"Bearer {token(settings, **claims)}"}
    )

    assert response.status_code == 200
    assert store.users["identity-9"] == {
        "user_id": 1, "email": "ana@example.com", "first_name": "Ana", "last_name": ""
    }


def test_audience_is_checked_when_configured(settings):
    settings = settings.model_copy(update={"jwt_audience": "authenticated"})

    assert decode_token(token(settings, sub="a", aud="authenticated"), settings)["sub"] == "a"
    assert decode_token(token(settings, sub="a", aud="anon"), settings) is None


def test_identity_from_claims_without_metadata():
    assert identity_from_claims({"sub": "abc"}) == {
        "id": "abc", "email": None, "first_name": "", "last_name": ""
    }

"""
Authentication Utility - bearer tokens from the identity provider.

Provides:
- JWT verification of tokens issued by the identity provider
- FastAPI dependencies for protected routes

Signup, login and password handling belong to the identity provider.
"""

from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from career_assistant.core.config import get_settings, Settings
from career_assistant.core.errors import Unauthenticated
from career_assistant.api.dependencies import get_store
from career_assistant.services.store import Store

# Bearer token extractor; missing header is reported as 401 below
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str, settings: Settings) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None}
        )
    except JWTError:
        return None


def identity_from_claims(claims: dict) -> dict:
    """Build the caller identity {id, email, first_name, last_name} from token claims."""
    metadata = claims.get("user_metadata") or {}
    return {
        "id": claims["sub"],
        "email": claims.get("email"),
        "first_name": metadata.get("first_name") or "",
        "last_name": metadata.get("last_name") or ""
    }


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings)
) -> dict:
    """FastAPI dependency - verified identity of the caller."""
    if credentials is None:
        raise Unauthenticated("No token provided")

    payload = decode_token(credentials.credentials, settings)
    if not payload or not payload.get("sub"):
        raise Unauthenticated("Invalid token")

    return identity_from_claims(payload)


async def get_current_user(
    identity: dict = Depends(get_current_identity),
    store: Store = Depends(get_store)
) -> dict:
    """
    FastAPI dependency - authenticated caller with local user id.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user["user_id"]
    """
    user_id = await run_in_threadpool(store.find_or_create_local_user, identity)
    return {"user_id": user_id, "identity_id": identity["id"], "email": identity["email"]}

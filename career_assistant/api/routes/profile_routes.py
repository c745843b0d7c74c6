"""
Profile Routes

GET /profile - Get own profile
POST /profile - Create or update own profile
"""

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from career_assistant.api.dependencies import get_store
from career_assistant.core.auth import get_current_user
from career_assistant.services.store import Store
from career_assistant.schemas.schemas import ProfileRecord, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("")
async def get_profile(user: dict = Depends(get_current_user), store: Store = Depends(get_store)):
    """Get current user's profile, or {} if none exists yet."""
    profile = await run_in_threadpool(store.get_profile, user["user_id"])
    if profile is None:
        return {}
    return profile.model_dump()


@router.post("", response_model=ProfileRecord)
async def save_profile(
    data: ProfileUpdate,
    user: dict = Depends(get_current_user),
    store: Store = Depends(get_store)
):
    """Create or replace the profile. Fields not sent are stored empty."""
    record = ProfileRecord(
        user_id=user["user_id"],
        session_id=user["identity_id"],
        **{field: value or "" for field, value in data.model_dump().items()}
    )
    return await run_in_threadpool(store.upsert_profile, record)

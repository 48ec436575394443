"""
Profile API routes for the Task Manager
"""
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...database.database import get_session
from ...models.profile import ProfilePublic, ProfileUpdate
from ...models.user import UserSession
from ...services.profile_service import ProfileService
from ..deps import ensure_owner, get_current_user, raise_for_error

router = APIRouter(tags=["profile"])


@router.get("/{user_id}/profile", response_model=ProfilePublic)
async def get_profile(
    user_id: uuid.UUID,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    ensure_owner(user_id, current_user)
    profile, error = ProfileService.get_profile(session, user_id)
    if error:
        raise_for_error(error)
    return profile


@router.patch("/{user_id}/profile", response_model=ProfilePublic)
async def update_profile(
    user_id: uuid.UUID,
    profile_data: ProfileUpdate,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Update display name and avatar URL. Unknown fields such as email are ignored."""
    ensure_owner(user_id, current_user, "modify")
    profile, error = ProfileService.update_profile(session, user_id, profile_data)
    if error:
        raise_for_error(error)
    return profile

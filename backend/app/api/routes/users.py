"""
Profile endpoints.
"""

from fastapi import APIRouter, Depends

from app.api.deps import require_admin
from app.core.security import get_current_user_id
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.models.user import UserProfile
from app.schemas.user import ProfileUpdate, RoleUpdate
from app.services.user_service import get_profile, list_profiles, update_profile, update_role

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserProfile)
async def read_own_profile(
    user_id: str = Depends(get_current_user_id),
    store: DocumentStore = Depends(get_store),
):
    return await get_profile(store, user_id)


@router.put("/me", response_model=UserProfile)
async def edit_own_profile(
    changes: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    store: DocumentStore = Depends(get_store),
):
    """Update name or phone number. The role cannot be changed here."""
    return await update_profile(store, user_id, changes)


@router.get("/", response_model=list[UserProfile])
async def list_users(
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    return await list_profiles(store)


@router.put("/{user_id}/role", response_model=UserProfile)
async def change_role(
    user_id: str,
    payload: RoleUpdate,
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    return await update_role(store, user_id, payload.role, changed_by=admin_id)

"""
Profile reads and edits (users/{uid}).
"""

from datetime import datetime, timezone

from fastapi import HTTPException, status
from pydantic import ValidationError

from app.core.logging import get_logger
from app.infrastructure.store import DocumentStore, join_path, validate_key
from app.models.user import Role, UserProfile
from app.schemas.user import ProfileUpdate

logger = get_logger(__name__)


async def get_profile(store: DocumentStore, user_id: str) -> UserProfile:
    raw = await store.get(join_path("users", validate_key(user_id)))
    if not isinstance(raw, dict):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return UserProfile.model_validate({**raw, "uid": user_id})


async def update_profile(store: DocumentStore, user_id: str, changes: ProfileUpdate) -> UserProfile:
    """Apply a self-service edit. The role is never touched here."""
    await get_profile(store, user_id)

    values = changes.model_dump(by_alias=True, exclude_none=True)
    values["updatedAt"] = datetime.now(timezone.utc).isoformat()
    await store.update(join_path("users", user_id), values)

    logger.info("profile_updated", user_id=user_id, fields=sorted(values))
    return await get_profile(store, user_id)


async def list_profiles(store: DocumentStore) -> list[UserProfile]:
    tree = await store.get("users") or {}
    profiles = []
    for uid, raw in tree.items():
        if not isinstance(raw, dict):
            continue
        try:
            profiles.append(UserProfile.model_validate({**raw, "uid": uid}))
        except ValidationError:
            logger.warning("profile_skipped", user_id=uid)
    return sorted(profiles, key=lambda p: p.created_at or "", reverse=True)


async def update_role(store: DocumentStore, user_id: str, role: Role, changed_by: str) -> UserProfile:
    await get_profile(store, user_id)
    await store.update(join_path("users", user_id), {
        "role": role.value,
        "updatedAt": datetime.now(timezone.utc).isoformat(),
    })
    logger.info("role_changed", user_id=user_id, role=role.value, changed_by=changed_by)
    return await get_profile(store, user_id)

"""
Showroom management (showrooms/{id}).
"""

from datetime import datetime, timezone

from fastapi import HTTPException, status
from pydantic import ValidationError

from app.core.logging import get_logger
from app.infrastructure.store import DocumentStore, join_path, validate_key
from app.models.showroom import Showroom, ShowroomStatus
from app.schemas.showroom import ShowroomCreate

logger = get_logger(__name__)


async def list_showrooms(store: DocumentStore) -> list[Showroom]:
    tree = await store.get("showrooms") or {}
    showrooms = []
    for showroom_id, raw in tree.items():
        if not isinstance(raw, dict):
            continue
        try:
            showrooms.append(Showroom.model_validate({**raw, "id": showroom_id}))
        except ValidationError:
            logger.warning("showroom_record_skipped", showroom_id=showroom_id)
    return showrooms


async def get_showroom(store: DocumentStore, showroom_id: str) -> Showroom:
    raw = await store.get(join_path("showrooms", validate_key(showroom_id)))
    if not isinstance(raw, dict):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Showroom not found",
        )
    return Showroom.model_validate({**raw, "id": showroom_id})


async def create_showroom(store: DocumentStore, data: ShowroomCreate) -> Showroom:
    record = {
        **data.model_dump(by_alias=True),
        "status": ShowroomStatus.ACTIVE.value,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    showroom_id = await store.push("showrooms", record)
    logger.info("showroom_created", showroom_id=showroom_id, city=data.city)
    return Showroom.model_validate({**record, "id": showroom_id})


async def toggle_showroom(store: DocumentStore, showroom_id: str) -> Showroom:
    """Flip active/inactive with a single-field write."""
    showroom = await get_showroom(store, showroom_id)
    new_status = (
        ShowroomStatus.INACTIVE if showroom.status == ShowroomStatus.ACTIVE else ShowroomStatus.ACTIVE
    )
    await store.set(join_path("showrooms", showroom_id, "status"), new_status.value)

    logger.info("showroom_status_changed", showroom_id=showroom_id, status=new_status.value)
    return showroom.model_copy(update={"status": new_status})


async def delete_showroom(store: DocumentStore, showroom_id: str) -> None:
    await get_showroom(store, showroom_id)
    await store.remove(join_path("showrooms", showroom_id))
    logger.info("showroom_deleted", showroom_id=showroom_id)

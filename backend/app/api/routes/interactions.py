"""
Interaction logging endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import require_admin
from app.core.security import get_optional_user_id
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.models.interaction import InteractionEvent
from app.schemas.interaction import InteractionCreate
from app.services.interaction_service import latest_events, record_event

router = APIRouter(prefix="/interactions", tags=["Interactions"])


@router.post("/", response_model=InteractionEvent, status_code=status.HTTP_201_CREATED)
async def log_interaction(
    data: InteractionCreate,
    user_id: Optional[str] = Depends(get_optional_user_id),
    store: DocumentStore = Depends(get_store),
):
    """Record a view, like, share or contact. Guests may log too."""
    return await record_event(store, data, user_id)


@router.get("/", response_model=list[InteractionEvent])
async def list_interactions(
    feature_id: Optional[str] = Query(None, alias="featureId"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    return await latest_events(store, feature_id=feature_id, limit=limit)

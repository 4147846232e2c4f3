"""
Contact form endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import require_admin
from app.core.security import get_optional_user_id
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.models.contact import ContactMessage
from app.schemas.contact import ContactCreate, ContactReceived
from app.services.contact_service import list_messages, submit_message

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("/", response_model=ContactReceived, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: ContactCreate,
    user_id: Optional[str] = Depends(get_optional_user_id),
    store: DocumentStore = Depends(get_store),
):
    """Signed-in users replace their previous message; guests add a new one."""
    message_id = await submit_message(store, data, user_id)
    return ContactReceived(id=message_id)


@router.get("/", response_model=list[ContactMessage])
async def list_contact_messages(
    search: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    return await list_messages(store, search=search, limit=limit)

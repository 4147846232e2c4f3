"""
Showroom management endpoints (admin only).
"""

from fastapi import APIRouter, Depends, status

from app.api.deps import require_admin
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.models.showroom import Showroom
from app.schemas.showroom import ShowroomCreate
from app.services.showroom_service import create_showroom, delete_showroom, list_showrooms, toggle_showroom

router = APIRouter(prefix="/showrooms", tags=["Showrooms"], dependencies=[Depends(require_admin)])


@router.get("/", response_model=list[Showroom])
async def list_showrooms_endpoint(store: DocumentStore = Depends(get_store)):
    return await list_showrooms(store)


@router.post("/", response_model=Showroom, status_code=status.HTTP_201_CREATED)
async def add_showroom(data: ShowroomCreate, store: DocumentStore = Depends(get_store)):
    return await create_showroom(store, data)


@router.post("/{showroom_id}/toggle", response_model=Showroom)
async def toggle_showroom_status(showroom_id: str, store: DocumentStore = Depends(get_store)):
    """Activate an inactive showroom or deactivate an active one."""
    return await toggle_showroom(store, showroom_id)


@router.delete("/{showroom_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_showroom(showroom_id: str, store: DocumentStore = Depends(get_store)):
    await delete_showroom(store, showroom_id)

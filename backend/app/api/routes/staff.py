"""
Staff management endpoints (admin only).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import require_admin
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.models.staff import Staff
from app.schemas.staff import StaffCreate, StaffUpdate
from app.services.staff_service import create_staff, delete_staff, get_staff, list_staff, update_staff

router = APIRouter(prefix="/staff", tags=["Staff"], dependencies=[Depends(require_admin)])


@router.get("/", response_model=list[Staff])
async def list_staff_endpoint(
    search: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    store: DocumentStore = Depends(get_store),
):
    return await list_staff(store, search=search, department=department)


@router.get("/{staff_id}", response_model=Staff)
async def read_staff(staff_id: str, store: DocumentStore = Depends(get_store)):
    return await get_staff(store, staff_id)


@router.post("/", response_model=Staff, status_code=status.HTTP_201_CREATED)
async def add_staff(data: StaffCreate, store: DocumentStore = Depends(get_store)):
    """Add a staff member; employee id, username, full name and age are generated."""
    return await create_staff(store, data)


@router.put("/{staff_id}", response_model=Staff)
async def edit_staff(staff_id: str, data: StaffUpdate, store: DocumentStore = Depends(get_store)):
    return await update_staff(store, staff_id, data)


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_staff(staff_id: str, store: DocumentStore = Depends(get_store)):
    await delete_staff(store, staff_id)

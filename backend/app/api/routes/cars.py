"""
Catalog endpoints: public reads, admin inventory management.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import require_admin
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreate, VehicleUpdate
from app.services.catalog_service import (
    create_vehicle,
    delete_vehicle,
    get_vehicle,
    load_catalog,
    update_vehicle,
)

router = APIRouter(prefix="/cars", tags=["Cars"])


@router.get("/", response_model=list[Vehicle])
async def list_cars(
    search: Optional[str] = Query(None, description="Match on name, category or location"),
    include_inactive: bool = Query(False, alias="includeInactive"),
    store: DocumentStore = Depends(get_store),
):
    cars = await load_catalog(store)
    if not include_inactive:
        cars = [c for c in cars if c.status == "active"]
    if search:
        needle = search.lower()
        cars = [
            c for c in cars
            if needle in c.name.lower() or needle in c.category.lower() or needle in c.location.lower()
        ]
    return cars


@router.get("/{car_id}", response_model=Vehicle)
async def read_car(car_id: str, store: DocumentStore = Depends(get_store)):
    return await get_vehicle(store, car_id)


@router.post("/", response_model=Vehicle, status_code=status.HTTP_201_CREATED)
async def add_car(
    data: VehicleCreate,
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    """Add a car. The first three features become its headline features."""
    return await create_vehicle(store, data)


@router.put("/{car_id}", response_model=Vehicle)
async def edit_car(
    car_id: str,
    changes: VehicleUpdate,
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    return await update_vehicle(store, car_id, changes)


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_car(
    car_id: str,
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    await delete_vehicle(store, car_id)

"""
Vehicle catalog (cars/{id}): lenient loading plus admin CRUD.

Catalog records were written by several generations of the add-car form, so
loading never fails on a single bad record: it is skipped with a warning and
the rest of the catalog is still served.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

from fastapi import HTTPException, status
from pydantic import ValidationError

from app.core.logging import get_logger
from app.infrastructure.store import DocumentStore, InvalidPathError, generate_push_id, join_path, validate_key
from app.models.vehicle import MainFeature, Vehicle
from app.schemas.vehicle import VehicleCreate, VehicleUpdate

logger = get_logger(__name__)

HEADLINE_FEATURES = 3


def parse_catalog(tree: Optional[dict[str, Any]]) -> list[Vehicle]:
    """Vehicles from a `cars` snapshot, in key order. Unreadable records are skipped."""
    vehicles = []
    for car_id, raw in (tree or {}).items():
        if not isinstance(raw, dict):
            logger.warning("catalog_record_skipped", car_id=car_id, reason="not_an_object")
            continue
        try:
            vehicles.append(Vehicle.model_validate({**raw, "id": car_id}))
        except ValidationError as e:
            logger.warning("catalog_record_skipped", car_id=car_id, reason="invalid", errors=e.error_count())
    return vehicles


async def load_catalog(store: DocumentStore) -> list[Vehicle]:
    return parse_catalog(await store.get("cars"))


async def get_vehicle(store: DocumentStore, car_id: str) -> Vehicle:
    raw = await store.get(join_path("cars", validate_key(car_id)))
    if not isinstance(raw, dict):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Car {car_id} not found",
        )
    return Vehicle.model_validate({**raw, "id": car_id})


def placeholder_for(name: str) -> str:
    return f"/placeholder.svg?height=300&width=400&query={quote(name)}"


def _headline(features: list[str]) -> list[MainFeature]:
    return [MainFeature(name=f) for f in features[:HEADLINE_FEATURES]]


async def create_vehicle(store: DocumentStore, data: VehicleCreate) -> Vehicle:
    car_id = data.id or generate_push_id()
    try:
        validate_key(car_id)
    except InvalidPathError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid car id: {car_id}",
        ) from None
    if await store.get(join_path("cars", car_id)) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Car {car_id} already exists",
        )
    if data.discount > data.price:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Discount cannot exceed the price",
        )

    now = datetime.now(timezone.utc).isoformat()
    vehicle = Vehicle(
        id=car_id,
        name=data.name,
        year=data.year,
        price=data.price,
        discount=data.discount,
        image_src=data.image_src or placeholder_for(data.name),
        category=data.category,
        fuel_type=data.fuel_type,
        transmission=data.transmission,
        location=data.location,
        mileage=data.mileage,
        description=data.description,
        main_features=_headline(data.features),
        all_features=data.features,
        variants=data.variants,
        status="active",
        created_at=now,
        updated_at=now,
    )
    await store.set(join_path("cars", car_id), vehicle.to_record(exclude={"id"}))

    logger.info("car_created", car_id=car_id, name=vehicle.name, price=vehicle.price)
    return vehicle


async def update_vehicle(store: DocumentStore, car_id: str, changes: VehicleUpdate) -> Vehicle:
    current = await get_vehicle(store, car_id)

    values = changes.model_dump(by_alias=True, exclude_none=True, mode="json")
    features = values.pop("features", None)
    if features is not None:
        values["mainFeatures"] = [f.model_dump(exclude_none=True) for f in _headline(features)]
        values["allFeatures"] = features

    price = values.get("price", current.price)
    discount = values.get("discount", current.discount)
    if discount > price:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Discount cannot exceed the price",
        )

    values["updatedAt"] = datetime.now(timezone.utc).isoformat()
    await store.update(join_path("cars", car_id), values)

    logger.info("car_updated", car_id=car_id, fields=sorted(values))
    return await get_vehicle(store, car_id)


async def delete_vehicle(store: DocumentStore, car_id: str) -> None:
    """Remove a car. Existing bookings keep their embedded copy of its data."""
    await get_vehicle(store, car_id)
    await store.remove(join_path("cars", car_id))
    logger.info("car_deleted", car_id=car_id)

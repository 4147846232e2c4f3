"""
Booking service: form submission, per-user and admin views, cancellation.

KEY SCHEME
==========

Records live at bookings/{userId}/{bookingId}. New bookings use the
synthetic key `{carId}_{epochMillis}` and also store `carId` in the record,
so a user can book the same car more than once and the car is known without
parsing the key.

Older records were keyed by the bare carId (one booking per car per user).
They are still read correctly (carId is derived from the key) and
`migrate_legacy_bookings` re-keys them.

READ PATH
=========

Every view reads the raw snapshot and the catalog, then goes through
app.services.reconciliation. There is no cached normalized copy anywhere:
reconciliation is cheap and pure, so it is simply re-run per read and per
stream update.

No locking: two writers on the same booking path are last-write-wins.
Key milliseconds are strictly increasing within a process and a key that is
already taken is skipped, so a double submit in the same millisecond still
produces two bookings.
"""

import time
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Mapping, Sequence

from fastapi import HTTPException, status

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import reconciliation_latency, record_booking_write, record_reconciliation
from app.infrastructure.store import DocumentStore, join_path, validate_key
from app.models.booking import BookingStatus, NormalizedBooking
from app.models.vehicle import Vehicle
from app.schemas.booking import BookingCreate
from app.services.catalog_service import get_vehicle, load_catalog
from app.services.reconciliation import (
    booking_key,
    flatten_bookings,
    index_catalog,
    is_synthetic_key,
    parse_timestamp,
    reconcile,
    reconcile_one,
    resolve_car_id,
    sort_by_created_at,
    user_bookings,
)

logger = get_logger(__name__)

_last_key_millis = 0


def _reject(detail: str) -> HTTPException:
    record_booking_write("create", "rejected")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def normalize(
    raw_bookings: Sequence[Mapping[str, Any]],
    catalog: Sequence[Vehicle],
    view: str,
) -> list[NormalizedBooking]:
    """Reconcile and sort newest first, recording metrics for the view."""
    settings = get_settings()
    catalog_by_id = index_catalog(catalog)

    started = time.perf_counter()
    bookings = sort_by_created_at(reconcile(raw_bookings, catalog_by_id, settings.PLACEHOLDER_IMAGE))
    reconciliation_latency.observe(time.perf_counter() - started)

    misses = sum(1 for raw in raw_bookings if resolve_car_id(raw) not in catalog_by_id)
    record_reconciliation(view, misses)
    return bookings


def _next_key_millis(created: datetime) -> int:
    global _last_key_millis
    _last_key_millis = max(int(created.timestamp() * 1000), _last_key_millis + 1)
    return _last_key_millis


async def _free_booking_key(store: DocumentStore, user_id: str, car_id: str, created: datetime) -> str:
    booking_id = booking_key(car_id, _next_key_millis(created))
    # Another worker may already hold this millisecond for the same car
    while await store.get(join_path("bookings", user_id, booking_id)) is not None:
        booking_id = booking_key(car_id, _next_key_millis(created))
    return booking_id


async def create_booking(store: DocumentStore, user_id: str, data: BookingCreate) -> NormalizedBooking:
    """
    Validate the booking form against the catalog and write the record.
    Raises 404 for an unknown car, 400 for business-rule failures.
    """
    vehicle = await get_vehicle(store, data.car_id)

    if not data.agreed_to_terms:
        logger.warning("booking_rejected", user_id=user_id, car_id=data.car_id, reason="terms_not_agreed")
        raise _reject("Please fill in all required fields and agree to the terms.")

    if vehicle.variants and data.preferred_variant not in vehicle.variants:
        logger.warning(
            "booking_rejected",
            user_id=user_id,
            car_id=data.car_id,
            reason="unknown_variant",
            variant=data.preferred_variant,
        )
        raise _reject(f"Variant must be one of: {', '.join(vehicle.variants)}")

    created = datetime.now(timezone.utc)
    booking_id = await _free_booking_key(store, user_id, vehicle.id, created)
    record = {
        "carId": vehicle.id,
        "carName": vehicle.name,
        "carImage": vehicle.image_src,
        "carModel": vehicle.name,
        "carYear": str(vehicle.year),
        "price": vehicle.price,
        "discount": vehicle.discount,
        "ownerName": data.full_name,
        "email": data.email_address,
        "phone": data.phone_number,
        "bookingDate": data.booking_date,
        "pickupLocation": data.city,
        "preferredVariant": data.preferred_variant,
        "paymentPreference": data.payment_preference.value,
        "sendUpdates": data.send_updates,
        "status": BookingStatus.CONFIRMED.value,
        "createdAt": created.isoformat(),
    }

    try:
        await store.set(join_path("bookings", user_id, booking_id), record)
    except Exception:
        record_booking_write("create", "error")
        raise

    record_booking_write("create", "success")
    logger.info("booking_created", booking_id=booking_id, user_id=user_id, car_id=vehicle.id)
    return reconcile_one(
        {**record, "id": booking_id, "userId": user_id},
        {vehicle.id: vehicle},
        get_settings().PLACEHOLDER_IMAGE,
    )


async def get_user_bookings(store: DocumentStore, user_id: str) -> list[NormalizedBooking]:
    """All bookings for a user, reconciled, newest first."""
    tree = await store.get(join_path("bookings", user_id))
    catalog = await load_catalog(store)
    return normalize(user_bookings(user_id, tree), catalog, view="user")


async def get_all_bookings(store: DocumentStore) -> list[NormalizedBooking]:
    """Every user's bookings for the admin table, reconciled, newest first."""
    tree = await store.get("bookings")
    catalog = await load_catalog(store)
    return normalize(flatten_bookings(tree), catalog, view="admin")


async def stream_all_bookings(store: DocumentStore) -> AsyncIterator[list[NormalizedBooking]]:
    """
    The admin view, re-emitted on every change under `bookings`.
    Closing the generator closes the underlying store watcher.
    """
    watcher = store.watch("bookings")
    try:
        async for tree in watcher:
            catalog = await load_catalog(store)
            yield normalize(flatten_bookings(tree), catalog, view="stream")
    finally:
        await watcher.aclose()


async def cancel_booking(store: DocumentStore, user_id: str, booking_id: str) -> None:
    """
    Cancel by deleting the record; bookings are never updated in place.
    Only the owner can cancel: the path is scoped to their uid.
    """
    path = join_path("bookings", user_id, validate_key(booking_id))
    if await store.get(path) is None:
        record_booking_write("cancel", "rejected")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )

    await store.remove(path)
    record_booking_write("cancel", "success")
    logger.info("booking_cancelled", booking_id=booking_id, user_id=user_id)


def _legacy_created_at(record: Mapping[str, Any]) -> datetime:
    seconds = parse_timestamp(record.get("createdAt"))
    if not seconds:
        return datetime.now(timezone.utc)
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


async def migrate_legacy_bookings(store: DocumentStore) -> tuple[int, int]:
    """
    Re-key bookings stored under a bare carId to `{carId}_{epochMillis}`.

    The record gains an explicit carId; nothing else changes. Records whose
    new key is already taken are left alone and counted as skipped.
    Returns (migrated, skipped).
    """
    tree = await store.get("bookings") or {}
    migrated = skipped = 0

    for user_id, bookings in tree.items():
        if not isinstance(bookings, dict):
            continue
        for old_key, record in bookings.items():
            if not isinstance(record, dict) or is_synthetic_key(old_key):
                continue
            car_id = resolve_car_id({**record, "id": old_key})
            new_key = booking_key(car_id, _legacy_created_at(record))
            if new_key in bookings:
                skipped += 1
                logger.warning("booking_migration_skipped", user_id=user_id, booking_id=old_key, new_key=new_key)
                continue

            await store.update(join_path("bookings", user_id), {
                new_key: {**record, "carId": car_id},
                old_key: None,
            })
            migrated += 1
            record_booking_write("migrate", "success")

    logger.info("booking_migration_finished", migrated=migrated, skipped=skipped)
    return migrated, skipped

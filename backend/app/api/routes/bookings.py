"""
Booking endpoints. Every response carries reconciled bookings only.
"""

import json

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import StreamingResponse

from app.api.deps import require_admin, require_buyer
from app.core.logging import get_logger
from app.core.security import get_current_user_id
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.models.booking import NormalizedBooking
from app.schemas.booking import BookingCancelResponse, BookingCreate, MigrationResponse
from app.services.booking_service import (
    cancel_booking,
    create_booking,
    get_all_bookings,
    get_user_bookings,
    migrate_legacy_bookings,
    stream_all_bookings,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=NormalizedBooking, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    user_id: str = Depends(require_buyer),
    store: DocumentStore = Depends(get_store),
):
    """
    Book a car.

    The form is validated against the catalog (car exists, variant offered)
    before anything is written.
    """
    return await create_booking(store, user_id, booking_data)


@router.get("/", response_model=list[NormalizedBooking])
async def list_user_bookings(
    user_id: str = Depends(get_current_user_id),
    store: DocumentStore = Depends(get_store),
):
    """Get all bookings for the authenticated user, newest first."""
    return await get_user_bookings(store, user_id)


@router.get("/all", response_model=list[NormalizedBooking])
async def list_all_bookings(
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    return await get_all_bookings(store)


@router.get("/stream")
async def stream_bookings(
    request: Request,
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    """
    Server-sent events: the full reconciled admin view now and after every
    booking change. Disconnecting closes the store watcher.
    """

    async def event_stream():
        snapshots = stream_all_bookings(store)
        logger.info("booking_stream_opened", admin_id=admin_id)
        try:
            async for bookings in snapshots:
                if await request.is_disconnected():
                    break
                payload = json.dumps([b.model_dump(by_alias=True, mode="json") for b in bookings])
                yield f"event: bookings\ndata: {payload}\n\n"
        finally:
            await snapshots.aclose()
            logger.info("booking_stream_closed", admin_id=admin_id)

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/migrate", response_model=MigrationResponse)
async def migrate_bookings(
    admin_id: str = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    """Re-key bookings stored under the old one-booking-per-car scheme."""
    migrated, skipped = await migrate_legacy_bookings(store)
    return MigrationResponse(migrated=migrated, skipped=skipped)


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def cancel_booking_endpoint(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    store: DocumentStore = Depends(get_store),
):
    """Cancel one of your own bookings."""
    await cancel_booking(store, user_id, booking_id)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking_id,
    )

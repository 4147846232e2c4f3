"""
Admin dashboard analytics, recomputed from live snapshots on each request.
"""

from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from app.api.deps import require_admin
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.schemas.analytics import (
    BookingAnalyticsResponse,
    CarAnalyticsResponse,
    CatalogAnalyticsResponse,
    SalesAnalyticsResponse,
)
from app.services import analytics
from app.services.booking_service import get_all_bookings
from app.services.catalog_service import load_catalog
from app.services.interaction_service import load_events

router = APIRouter(prefix="/analytics", tags=["Analytics"], dependencies=[Depends(require_admin)])


def _stats_payload(stats: analytics.VehicleStats) -> dict:
    return {**asdict(stats), "total_interactions": stats.total_interactions}


@router.get("/cars", response_model=CarAnalyticsResponse)
async def car_analytics(
    limit: int = Query(5, ge=1, le=50),
    store: DocumentStore = Depends(get_store),
):
    """Per-vehicle interaction counts and the top performers."""
    stats = analytics.aggregate(await load_events(store), await load_catalog(store))
    return CarAnalyticsResponse(
        vehicles=[_stats_payload(s) for s in stats],
        top_performing=[_stats_payload(s) for s in analytics.top_performing(stats, limit)],
        categories=[asdict(c) for c in analytics.category_breakdown(stats)],
        total_views=sum(s.views for s in stats),
        total_interactions=sum(s.total_interactions for s in stats),
    )


@router.get("/bookings", response_model=BookingAnalyticsResponse)
async def booking_analytics(
    days: int = Query(7, ge=1, le=90),
    store: DocumentStore = Depends(get_store),
):
    now = datetime.now(timezone.utc)
    bookings = await get_all_bookings(store)
    return BookingAnalyticsResponse(
        summary=asdict(analytics.booking_summary(bookings, now)),
        daily=[asdict(d) for d in analytics.daily_bookings(bookings, now.date(), days)],
    )


@router.get("/catalog", response_model=CatalogAnalyticsResponse)
async def catalog_analytics(store: DocumentStore = Depends(get_store)):
    catalog = await load_catalog(store)
    categories: dict[str, int] = {}
    for vehicle in catalog:
        categories[vehicle.category] = categories.get(vehicle.category, 0) + 1
    return CatalogAnalyticsResponse(
        total_vehicles=len(catalog),
        price_ranges=analytics.price_ranges(catalog),
        categories=categories,
        average_price=round(sum(v.price for v in catalog) / len(catalog), 2) if catalog else None,
    )


@router.get("/sales", response_model=SalesAnalyticsResponse)
async def sales_analytics(store: DocumentStore = Depends(get_store)):
    bookings = await get_all_bookings(store)
    summary = analytics.sales_summary(bookings)
    return SalesAnalyticsResponse(
        **asdict(summary),
        payment_methods=[asdict(p) for p in analytics.payment_breakdown(bookings)],
    )

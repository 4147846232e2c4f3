"""
Dashboard analytics computed from store snapshots.

Everything here is a pure function of its inputs (a catalog, an interaction
log, a list of reconciled bookings, and a clock value where dates matter),
so the admin endpoints can recompute on every snapshot.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from app.models.booking import BookingStatus, NormalizedBooking
from app.models.interaction import InteractionAction, InteractionEvent
from app.models.vehicle import Vehicle
from app.services.reconciliation import parse_timestamp

# Price bands used by the catalog widget (INR)
LAKH = 100_000
PRICE_BANDS = (
    ("Under ₹10L", 0, 10 * LAKH),
    ("₹10L - ₹20L", 10 * LAKH, 20 * LAKH),
    ("₹20L - ₹50L", 20 * LAKH, 50 * LAKH),
    ("Above ₹50L", 50 * LAKH, None),
)

_ACTIONS = {a.value for a in InteractionAction}

Event = Union[InteractionEvent, Mapping[str, Any]]


@dataclass
class VehicleStats:
    vehicle_id: str
    name: str
    category: str
    location: str
    price: int
    views: int = 0
    likes: int = 0
    shares: int = 0
    contacts: int = 0

    @property
    def total_interactions(self) -> int:
        return self.views + self.likes + self.shares + self.contacts

    @property
    def popularity(self) -> int:
        """Ranking score for the top-performing list."""
        return self.views + self.contacts


@dataclass
class CategoryStats:
    category: str
    count: int = 0
    total_views: int = 0


@dataclass
class DailyBookings:
    date: str
    weekday: str
    bookings: int = 0
    revenue: int = 0


@dataclass
class BookingSummary:
    today_bookings: int
    week_bookings: int
    total_bookings: int
    total_revenue: int
    avg_booking_value: float


@dataclass
class PaymentShare:
    method: str
    count: int
    percentage: float


@dataclass
class SalesSummary:
    total_bookings: int
    confirmed: int
    cash: int
    financed: int
    status_counts: dict[str, int] = field(default_factory=dict)
    monthly_revenue: dict[str, int] = field(default_factory=dict)


def _event_fields(event: Event) -> tuple[Any, Any]:
    if isinstance(event, InteractionEvent):
        return event.feature_id, event.action.value
    if isinstance(event, Mapping):
        return event.get("featureId"), event.get("action")
    return None, None


def aggregate(events: Iterable[Event], catalog: Sequence[Vehicle]) -> list[VehicleStats]:
    """
    Per-vehicle interaction counts covering the whole catalog, in catalog
    order. Vehicles nobody interacted with get all-zero counts; events for
    unknown vehicles or unknown actions are ignored.
    """
    counts: Counter = Counter()
    for event in events:
        feature_id, action = _event_fields(event)
        if action in _ACTIONS and isinstance(feature_id, str):
            counts[(feature_id, action)] += 1

    return [
        VehicleStats(
            vehicle_id=vehicle.id,
            name=vehicle.name,
            category=vehicle.category,
            location=vehicle.location,
            price=vehicle.price,
            views=counts[(vehicle.id, "view")],
            likes=counts[(vehicle.id, "like")],
            shares=counts[(vehicle.id, "share")],
            contacts=counts[(vehicle.id, "contact")],
        )
        for vehicle in catalog
    ]


def top_performing(stats: Sequence[VehicleStats], limit: int = 5) -> list[VehicleStats]:
    # sorted() is stable, so equal scores keep catalog order
    return sorted(stats, key=lambda s: s.popularity, reverse=True)[:limit]


def category_breakdown(stats: Iterable[VehicleStats]) -> list[CategoryStats]:
    by_category: dict[str, CategoryStats] = {}
    for item in stats:
        bucket = by_category.setdefault(item.category, CategoryStats(category=item.category))
        bucket.count += 1
        bucket.total_views += item.views
    return list(by_category.values())


def price_ranges(catalog: Iterable[Vehicle]) -> dict[str, int]:
    ranges = {label: 0 for label, _, _ in PRICE_BANDS}
    for vehicle in catalog:
        for label, low, high in PRICE_BANDS:
            if vehicle.price >= low and (high is None or vehicle.price < high):
                ranges[label] += 1
                break
    return ranges


def booking_revenue(booking: NormalizedBooking) -> int:
    if booking.status == BookingStatus.CANCELLED:
        return 0
    return booking.net_price


def _created_date(booking: NormalizedBooking) -> Optional[date]:
    seconds = parse_timestamp(booking.created_at)
    if not seconds:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc).date()


def daily_bookings(
    bookings: Iterable[NormalizedBooking],
    today: date,
    days: int = 7,
) -> list[DailyBookings]:
    """Booking count and revenue per day for the trailing window, oldest first."""
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    buckets = {
        day: DailyBookings(date=day.isoformat(), weekday=day.strftime("%a"))
        for day in window
    }
    for booking in bookings:
        bucket = buckets.get(_created_date(booking))
        if bucket is not None:
            bucket.bookings += 1
            bucket.revenue += booking_revenue(booking)
    return [buckets[day] for day in window]


def booking_summary(bookings: Sequence[NormalizedBooking], now: datetime) -> BookingSummary:
    today = now.astimezone(timezone.utc).date()
    week_start = now.timestamp() - timedelta(days=7).total_seconds()

    today_count = sum(1 for b in bookings if _created_date(b) == today)
    week_count = sum(1 for b in bookings if parse_timestamp(b.created_at) >= week_start)
    revenue = sum(booking_revenue(b) for b in bookings)

    return BookingSummary(
        today_bookings=today_count,
        week_bookings=week_count,
        total_bookings=len(bookings),
        total_revenue=revenue,
        avg_booking_value=round(revenue / len(bookings), 2) if bookings else 0.0,
    )


def _payment_method(booking: NormalizedBooking) -> str:
    method = booking.payment_preference.strip().lower()
    if not method or method == "n/a":
        return "cash"
    return method


def payment_breakdown(bookings: Sequence[NormalizedBooking]) -> list[PaymentShare]:
    counts = Counter(_payment_method(b) for b in bookings)
    total = len(bookings)
    return [
        PaymentShare(
            method=method.capitalize(),
            count=count,
            percentage=round(count / total * 100, 1),
        )
        for method, count in counts.items()
    ]


def sales_summary(bookings: Sequence[NormalizedBooking]) -> SalesSummary:
    methods = Counter(_payment_method(b) for b in bookings)
    monthly: dict[str, int] = {}
    for booking in bookings:
        created = _created_date(booking)
        if created is None:
            continue
        month = created.strftime("%Y-%m")
        monthly[month] = monthly.get(month, 0) + booking_revenue(booking)

    return SalesSummary(
        total_bookings=len(bookings),
        confirmed=sum(1 for b in bookings if b.status == BookingStatus.CONFIRMED),
        cash=methods.get("cash", 0),
        financed=methods.get("finance", 0) + methods.get("lease", 0),
        status_counts=dict(Counter(b.status.value for b in bookings)),
        monthly_revenue=dict(sorted(monthly.items())),
    )

"""
Tests for the interaction aggregator and dashboard analytics.
"""

from datetime import date, datetime, timezone

from app.models.interaction import InteractionAction, InteractionEvent
from app.models.vehicle import Vehicle
from app.services import analytics
from app.services.reconciliation import reconcile

CATALOG = [
    Vehicle(id="a", name="Car A", category="SUV", price=500000),
    Vehicle(id="b", name="Car B", category="Sedan", price=1500000),
    Vehicle(id="c", name="Car C", category="SUV", price=2500000),
    Vehicle(id="d", name="Car D", category="Sports", price=36000000),
]


def _event(feature_id, action):
    return {"featureId": feature_id, "action": action, "timestamp": "2025-01-01T00:00:00Z"}


def test_aggregate_covers_whole_catalog_without_events():
    stats = analytics.aggregate([], CATALOG)

    assert len(stats) == len(CATALOG)
    assert [s.vehicle_id for s in stats] == ["a", "b", "c", "d"]
    assert all(s.total_interactions == 0 for s in stats)


def test_aggregate_counts_and_ignores_unknowns():
    events = [
        _event("a", "view"),
        _event("a", "view"),
        _event("a", "like"),
        _event("b", "contact"),
        _event("b", "share"),
        _event("zzz", "view"),
        _event("a", "purchase"),
        {"action": "view"},
        InteractionEvent(feature_id="c", action=InteractionAction.VIEW, timestamp="2025-01-01T00:00:00Z"),
    ]
    stats = {s.vehicle_id: s for s in analytics.aggregate(events, CATALOG)}

    assert (stats["a"].views, stats["a"].likes) == (2, 1)
    assert (stats["b"].contacts, stats["b"].shares) == (1, 1)
    assert stats["c"].views == 1
    assert stats["d"].total_interactions == 0
    assert sum(s.total_interactions for s in stats.values()) == 6


def test_top_performing_ranks_by_views_plus_contacts_with_stable_ties():
    events = [_event("b", "view"), _event("c", "contact"), _event("d", "view"), _event("d", "contact")]
    stats = analytics.aggregate(events, CATALOG)

    top = analytics.top_performing(stats, limit=3)
    assert [s.vehicle_id for s in top] == ["d", "b", "c"]
    assert len(analytics.top_performing(stats)) == 4


def test_category_breakdown():
    stats = analytics.aggregate([_event("a", "view"), _event("c", "view")], CATALOG)
    by_category = {c.category: c for c in analytics.category_breakdown(stats)}

    assert by_category["SUV"].count == 2
    assert by_category["SUV"].total_views == 2
    assert by_category["Sedan"].total_views == 0


def test_price_ranges():
    ranges = analytics.price_ranges(CATALOG + [Vehicle(id="e", name="E", price=1000000)])
    assert list(ranges.values()) == [1, 2, 1, 1]


def _bookings():
    raws = [
        {"id": "1", "price": 1000000, "discount": 100000, "paymentPreference": "cash",
         "createdAt": "2025-03-10T09:00:00Z"},
        {"id": "2", "price": 500000, "paymentPreference": "finance", "createdAt": "2025-03-09T09:00:00Z"},
        {"id": "3", "price": 700000, "status": "Cancelled", "paymentPreference": "lease",
         "createdAt": "2025-03-10T12:00:00Z"},
        {"id": "4", "price": 300000, "createdAt": "2025-02-01T00:00:00Z"},
        {"id": "5", "price": 100, "createdAt": "garbage"},
    ]
    return reconcile(raws, [])


def test_daily_bookings_window():
    days = analytics.daily_bookings(_bookings(), today=date(2025, 3, 10), days=3)

    assert [d.date for d in days] == ["2025-03-08", "2025-03-09", "2025-03-10"]
    assert [d.bookings for d in days] == [0, 1, 2]
    # The cancelled booking counts as a booking but earns nothing
    assert days[-1].revenue == 900000


def test_booking_summary():
    summary = analytics.booking_summary(_bookings(), now=datetime(2025, 3, 10, 18, 0, tzinfo=timezone.utc))

    assert summary.today_bookings == 2
    assert summary.week_bookings == 3
    assert summary.total_bookings == 5
    assert summary.total_revenue == 900000 + 500000 + 300000 + 100
    assert summary.avg_booking_value == round(summary.total_revenue / 5, 2)


def test_booking_summary_empty():
    summary = analytics.booking_summary([], now=datetime(2025, 3, 10, tzinfo=timezone.utc))
    assert summary.total_bookings == 0
    assert summary.avg_booking_value == 0.0


def test_payment_breakdown_counts_missing_as_cash():
    shares = {p.method: p for p in analytics.payment_breakdown(_bookings())}

    assert shares["Cash"].count == 3
    assert shares["Finance"].count == 1
    assert shares["Lease"].percentage == 20.0


def test_sales_summary():
    summary = analytics.sales_summary(_bookings())

    assert summary.total_bookings == 5
    assert summary.confirmed == 4
    assert summary.cash == 3
    assert summary.financed == 2
    assert summary.status_counts == {"Confirmed": 4, "Cancelled": 1}
    assert summary.monthly_revenue == {"2025-02": 300000, "2025-03": 1400000}

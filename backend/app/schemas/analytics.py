"""
Response schemas for the admin dashboard analytics endpoints.
"""

from typing import Optional

from pydantic import Field

from app.models.base import CamelModel


class VehicleStatsResponse(CamelModel):
    vehicle_id: str
    name: str
    category: str
    location: str
    price: int
    views: int
    likes: int
    shares: int
    contacts: int
    total_interactions: int


class CategoryStatsResponse(CamelModel):
    category: str
    count: int
    total_views: int


class CarAnalyticsResponse(CamelModel):
    vehicles: list[VehicleStatsResponse]
    top_performing: list[VehicleStatsResponse]
    categories: list[CategoryStatsResponse]
    total_views: int
    total_interactions: int


class DailyBookingsResponse(CamelModel):
    date: str
    weekday: str
    bookings: int
    revenue: int


class BookingSummaryResponse(CamelModel):
    today_bookings: int
    week_bookings: int
    total_bookings: int
    total_revenue: int
    avg_booking_value: float


class BookingAnalyticsResponse(CamelModel):
    summary: BookingSummaryResponse
    daily: list[DailyBookingsResponse]


class CatalogAnalyticsResponse(CamelModel):
    total_vehicles: int
    price_ranges: dict[str, int]
    categories: dict[str, int]
    average_price: Optional[float] = None


class PaymentShareResponse(CamelModel):
    method: str
    count: int
    percentage: float


class SalesAnalyticsResponse(CamelModel):
    total_bookings: int
    confirmed: int
    cash: int
    financed: int
    status_counts: dict[str, int] = Field(default_factory=dict)
    monthly_revenue: dict[str, int] = Field(default_factory=dict)
    payment_methods: list[PaymentShareResponse] = Field(default_factory=list)

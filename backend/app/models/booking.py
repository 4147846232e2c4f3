"""
Booking shapes.

Raw booking records are deliberately NOT modelled: they are whatever a form
wrote at the time, and two generations of the booking form produced
different field sets. They stay plain mappings until
app.services.reconciliation turns them into a NormalizedBooking, the only
booking shape the API ever returns.
"""

from enum import Enum
from typing import Union

from pydantic import Field

from app.models.base import CamelModel
from app.models.vehicle import MainFeature


class BookingStatus(str, Enum):
    CONFIRMED = "Confirmed"
    PENDING = "Pending"
    CANCELLED = "Cancelled"


class NormalizedBooking(CamelModel):
    id: str
    user_id: str = ""
    car_id: str
    car_name: str
    car_image: str
    car_model: str
    year: Union[int, str]  # "N/A" when neither catalog nor record knows it
    price: int
    discount: int
    main_features: list[MainFeature] = Field(default_factory=list)
    owner_name: str
    booking_date: str
    pickup_location: str
    preferred_variant: str
    payment_preference: str
    status: BookingStatus
    created_at: str

    @property
    def net_price(self) -> int:
        return max(self.price - self.discount, 0)

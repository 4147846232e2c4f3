"""
Pydantic schemas for booking-related request/response validation.
"""

from enum import Enum

from pydantic import Field, field_validator

from app.infrastructure.store import validate_key
from app.models.base import CamelModel
from app.schemas.user import EMAIL_PATTERN, normalize_phone


class PaymentPreference(str, Enum):
    CASH = "cash"
    FINANCE = "finance"
    LEASE = "lease"


class BookingCreate(CamelModel):
    car_id: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str
    email_address: str
    preferred_variant: str = Field(..., min_length=1)
    booking_date: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    payment_preference: PaymentPreference
    agreed_to_terms: bool = False
    send_updates: bool = False

    @field_validator("car_id")
    @classmethod
    def _car_key(cls, value: str) -> str:
        return validate_key(value.strip())

    @field_validator("full_name", "preferred_variant", "booking_date", "city")
    @classmethod
    def _required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please fill in all required fields")
        return value

    @field_validator("phone_number")
    @classmethod
    def _phone(cls, value: str) -> str:
        return normalize_phone(value)

    @field_validator("email_address")
    @classmethod
    def _email(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value

    @field_validator("payment_preference", mode="before")
    @classmethod
    def _payment_lower(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class BookingCancelResponse(CamelModel):
    message: str
    booking_id: str


class MigrationResponse(CamelModel):
    migrated: int
    skipped: int

"""
Pydantic schemas for inventory (car) requests.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from app.infrastructure.store import validate_key
from app.models.base import CamelModel


class VehicleStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class VehicleCreate(CamelModel):
    id: Optional[str] = Field(None, min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    category: str = ""
    price: int = Field(..., ge=0)
    discount: int = Field(0, ge=0)
    year: int = Field(..., ge=1886, le=2100)
    fuel_type: str = ""
    transmission: str = ""
    mileage: str = ""
    location: str = ""
    image_src: str = ""
    description: str = Field("", max_length=2000)
    features: list[str] = Field(default_factory=list)
    variants: list[str] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _car_key(cls, value: Optional[str]) -> Optional[str]:
        return validate_key(value.strip()) if value is not None else None

    @field_validator("features", "variants")
    @classmethod
    def _non_empty_items(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item and item.strip()]


class VehicleUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    discount: Optional[int] = Field(None, ge=0)
    year: Optional[int] = Field(None, ge=1886, le=2100)
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    mileage: Optional[str] = None
    location: Optional[str] = None
    image_src: Optional[str] = None
    description: Optional[str] = Field(None, max_length=2000)
    features: Optional[list[str]] = None
    variants: Optional[list[str]] = None
    status: Optional[VehicleStatus] = None

"""
Vehicle model: one entry of the admin-curated catalog (cars/{id}).

Key design decisions:
- Catalog records are authoritative for name, image, year, price, discount
  and headline features; bookings only ever copy them.
- Numeric fields go through lenient coercion because the add-car form
  historically wrote prices and years as strings.
- `variants` lists the colour/variant options the booking form offers; an
  empty list means any variant is accepted.
"""

from typing import Any, Optional

from pydantic import Field, field_validator

from app.models.base import CamelModel, as_int


class MainFeature(CamelModel):
    name: str
    icon: Optional[str] = None  # UI icon reference, opaque here


class Vehicle(CamelModel):
    id: str
    name: str
    year: int = 0
    price: int = 0
    discount: int = 0
    image_src: str = ""
    category: str = ""
    fuel_type: str = ""
    transmission: str = ""
    location: str = ""
    mileage: str = ""
    description: str = ""
    main_features: list[MainFeature] = Field(default_factory=list)
    all_features: list[str] = Field(default_factory=list)
    variants: list[str] = Field(default_factory=list)
    status: str = "active"
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("year", "price", "discount", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any) -> int:
        return as_int(value, 0)

    @field_validator("mileage", mode="before")
    @classmethod
    def _mileage_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("main_features", mode="before")
    @classmethod
    def _feature_objects(cls, value: Any) -> list:
        if not isinstance(value, list):
            return []
        return [{"name": item} if isinstance(item, str) else item for item in value]

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, name={self.name}, price={self.price})>"

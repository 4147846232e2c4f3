"""
Booking reconciliation: raw booking records + catalog -> NormalizedBooking.

WHY THIS EXISTS
===============

Booking records are written straight from the booking form and have had two
different shapes over time:

  v1 (bookings keyed by carId, one per car per user):
      {carName, carImage, carModel, carYear: "2023", ownerName, bookingDate,
       pickupLocation, preferredVariant, paymentPreference, status, createdAt}

  v2 (pushed records, historical field names):
      {fullName, carModel, city, bookingDate, preferredVariant, ..., id}

and any field may be missing. The "my bookings" and admin views used to each
resolve these fields inline with slightly different fallback orders. Every
reader now goes through `reconcile`, which applies one fallback table:

  catalog value (vehicle still listed) -> value embedded in the record
  -> fixed default

RULES
=====

- Pure: same inputs, same output, no I/O. Safe to re-run on every snapshot.
- Total: every NormalizedBooking field has a value.
- Idempotent: feeding the output back in (with the same catalog) returns it
  unchanged.
- Order-preserving: sorting is a separate step (`sort_by_created_at`).
- Never raises on bad data: unparsable dates sort as the epoch, unknown
  statuses become Pending.
"""

import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from app.models.base import as_int
from app.models.booking import BookingStatus, NormalizedBooking
from app.models.vehicle import MainFeature, Vehicle

DEFAULT_PLACEHOLDER_IMAGE = "/placeholder.png"
UNKNOWN_CAR = "Unknown Car"
NOT_AVAILABLE = "N/A"
DEFAULT_OWNER = "User"
DEFAULT_BOOKING_DATE = "Not specified"
DEFAULT_LOCATION = "Unknown"

# {carId}_{epochMillis}; bare keys are the v1 "one booking per car" scheme
_SYNTHETIC_KEY = re.compile(r"^(?P<car_id>.+)_(?P<millis>\d{10,})$")

RawBooking = Union[Mapping[str, Any], NormalizedBooking]


def booking_key(car_id: str, created_at: Union[datetime, int]) -> str:
    """
    Synthetic booking key: lets one user book the same car repeatedly.
    `created_at` is a datetime or epoch milliseconds.
    """
    millis = created_at if isinstance(created_at, int) else int(created_at.timestamp() * 1000)
    return f"{car_id}_{millis}"


def car_id_from_key(booking_id: str) -> str:
    match = _SYNTHETIC_KEY.match(booking_id)
    return match.group("car_id") if match else booking_id


def is_synthetic_key(booking_id: str) -> bool:
    return _SYNTHETIC_KEY.match(booking_id) is not None


def parse_timestamp(value: Any) -> float:
    """
    Epoch seconds for an ISO-8601 string, date string, datetime or epoch
    number (seconds or milliseconds). Anything unparsable is 0.0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        # Values this large are JavaScript millisecond timestamps
        return float(value) / 1000 if value > 1e11 else float(value)
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.timestamp()
    except (OverflowError, OSError, ValueError):
        return 0.0


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _year(value: Any) -> Union[int, str]:
    year = as_int(value)
    return year if year else NOT_AVAILABLE


def _features(value: Any) -> list[MainFeature]:
    if not isinstance(value, list):
        return []
    features = []
    for item in value:
        if isinstance(item, MainFeature):
            features.append(item)
        elif isinstance(item, str) and item:
            features.append(MainFeature(name=item))
        elif isinstance(item, Mapping) and item.get("name"):
            icon = item.get("icon")
            features.append(MainFeature(name=str(item["name"]), icon=str(icon) if icon else None))
    return features


def _status(value: Any) -> BookingStatus:
    if value is None or value == "":
        return BookingStatus.CONFIRMED
    if isinstance(value, BookingStatus):
        return value
    wanted = str(value).strip().lower()
    for status in BookingStatus:
        if status.value.lower() == wanted:
            return status
    return BookingStatus.PENDING


def _as_mapping(raw: RawBooking) -> Mapping[str, Any]:
    if isinstance(raw, NormalizedBooking):
        return raw.model_dump(by_alias=True)
    return raw


def index_catalog(catalog: Iterable[Vehicle]) -> dict[str, Vehicle]:
    """Vehicle lookup by id. The first entry wins if an id repeats."""
    by_id: dict[str, Vehicle] = {}
    for vehicle in catalog:
        by_id.setdefault(vehicle.id, vehicle)
    return by_id


def resolve_car_id(record: Mapping[str, Any]) -> str:
    explicit = _first(record, "carId")
    if explicit is not None:
        return str(explicit)
    return car_id_from_key(str(record.get("id") or ""))


def reconcile_one(
    raw: RawBooking,
    catalog_by_id: Mapping[str, Vehicle],
    placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
) -> NormalizedBooking:
    record = _as_mapping(raw)
    car_id = resolve_car_id(record)
    vehicle = catalog_by_id.get(car_id)

    if vehicle is not None:
        car_name = vehicle.name
        car_image = vehicle.image_src or _text(_first(record, "carImage", "image", "imageSrc"), placeholder_image)
        car_model = vehicle.name
        year = vehicle.year or _year(_first(record, "carYear", "year"))
        price = vehicle.price
        discount = vehicle.discount
        main_features = list(vehicle.main_features) or _features(record.get("mainFeatures"))
    else:
        car_name = _text(_first(record, "carName", "name", "carModel"), UNKNOWN_CAR)
        car_image = _text(_first(record, "carImage", "image", "imageSrc"), placeholder_image)
        car_model = _text(_first(record, "carModel", "model"), NOT_AVAILABLE)
        year = _year(_first(record, "carYear", "year"))
        price = as_int(record.get("price"), 0)
        discount = as_int(record.get("discount"), 0)
        main_features = _features(record.get("mainFeatures"))

    return NormalizedBooking(
        id=_text(record.get("id"), car_id),
        user_id=_text(record.get("userId"), ""),
        car_id=car_id,
        car_name=car_name,
        car_image=car_image,
        car_model=car_model,
        year=year,
        price=price,
        discount=discount,
        main_features=main_features,
        owner_name=_text(_first(record, "ownerName", "fullName"), DEFAULT_OWNER),
        booking_date=_text(_first(record, "bookingDate", "date"), DEFAULT_BOOKING_DATE),
        pickup_location=_text(_first(record, "pickupLocation", "location", "city"), DEFAULT_LOCATION),
        preferred_variant=_text(record.get("preferredVariant"), NOT_AVAILABLE),
        payment_preference=_text(record.get("paymentPreference"), NOT_AVAILABLE),
        status=_status(record.get("status")),
        created_at=_text(record.get("createdAt"), NOT_AVAILABLE),
    )


def reconcile(
    raw_bookings: Iterable[RawBooking],
    catalog: Iterable[Vehicle],
    placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
) -> list[NormalizedBooking]:
    """Normalize every booking against the catalog, keeping input order."""
    catalog_by_id = catalog if isinstance(catalog, Mapping) else index_catalog(catalog)
    return [reconcile_one(raw, catalog_by_id, placeholder_image) for raw in raw_bookings]


def user_bookings(user_id: str, tree: Optional[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Rows for one user's `bookingId -> record` snapshot. The key is the id."""
    rows = []
    for booking_id, record in (tree or {}).items():
        if isinstance(record, Mapping):
            rows.append({**record, "id": booking_id, "userId": user_id})
    return rows


def flatten_bookings(tree: Optional[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Rows for the admin `userId -> bookingId -> record` snapshot."""
    rows = []
    for user_id, bookings in (tree or {}).items():
        if isinstance(bookings, Mapping):
            rows.extend(user_bookings(user_id, bookings))
    return rows


def sort_by_created_at(
    bookings: Sequence[NormalizedBooking],
    descending: bool = True,
) -> list[NormalizedBooking]:
    """
    Newest first by default. Stable; unparsable createdAt values count as the
    epoch, so they land last in descending order.
    """
    return sorted(bookings, key=lambda b: parse_timestamp(b.created_at), reverse=descending)

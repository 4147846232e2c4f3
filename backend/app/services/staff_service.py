"""
Staff management (staff/{id}).

Derived fields are recomputed on every write:
  fullName   - first, middle and last name joined
  age        - whole years from dateOfBirth
  employeeId - "EMP" + last six digits of the creation time in ms (kept on edit)
  username   - "first.last", lower-cased
"""

import time
from datetime import date, datetime, timezone
from typing import Any, Optional

from fastapi import HTTPException, status
from pydantic import ValidationError

from app.core.logging import get_logger
from app.infrastructure.store import DocumentStore, generate_push_id, join_path, validate_key
from app.models.staff import Staff
from app.schemas.staff import StaffCreate

logger = get_logger(__name__)


def compute_age(date_of_birth: str, today: Optional[date] = None) -> Optional[int]:
    """Age in whole years, or None when the date is missing or unparsable."""
    try:
        born = date.fromisoformat(date_of_birth[:10])
    except ValueError:
        return None
    today = today or datetime.now(timezone.utc).date()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def full_name(first: str, middle: str, last: str) -> str:
    return " ".join(part.strip() for part in (first, middle, last) if part and part.strip())


def username_for(first: str, last: str) -> str:
    return f"{first.strip()}.{last.strip()}".lower().replace(" ", "")


def new_employee_id() -> str:
    return f"EMP{int(time.time() * 1000) % 1_000_000:06d}"


def _build(staff_id: str, data: StaffCreate, employee_id: str, created_at: str) -> Staff:
    return Staff(
        **data.model_dump(mode="json"),
        id=staff_id,
        full_name=full_name(data.first_name, data.middle_name, data.last_name),
        age=compute_age(data.date_of_birth),
        employee_id=employee_id,
        username=username_for(data.first_name, data.last_name),
        created_at=created_at,
        updated_at=datetime.now(timezone.utc).isoformat(),
    )


async def list_staff(
    store: DocumentStore,
    search: Optional[str] = None,
    department: Optional[str] = None,
) -> list[Staff]:
    tree: dict[str, Any] = await store.get("staff") or {}
    members = []
    for staff_id, raw in tree.items():
        if not isinstance(raw, dict):
            continue
        try:
            members.append(Staff.model_validate({**raw, "id": staff_id}))
        except ValidationError:
            logger.warning("staff_record_skipped", staff_id=staff_id)

    if search:
        needle = search.lower()
        members = [
            m for m in members
            if needle in m.full_name.lower()
            or needle in m.employee_id.lower()
            or needle in m.email_address.lower()
            or needle in m.role.lower()
        ]
    if department:
        members = [m for m in members if m.department == department]
    return sorted(members, key=lambda m: m.created_at, reverse=True)


async def get_staff(store: DocumentStore, staff_id: str) -> Staff:
    raw = await store.get(join_path("staff", validate_key(staff_id)))
    if not isinstance(raw, dict):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff member not found",
        )
    return Staff.model_validate({**raw, "id": staff_id})


async def create_staff(store: DocumentStore, data: StaffCreate) -> Staff:
    staff_id = generate_push_id()
    member = _build(staff_id, data, new_employee_id(), datetime.now(timezone.utc).isoformat())
    await store.set(join_path("staff", staff_id), member.to_record(exclude={"id"}))

    logger.info("staff_created", staff_id=staff_id, employee_id=member.employee_id, role=member.role)
    return member


async def update_staff(store: DocumentStore, staff_id: str, data: StaffCreate) -> Staff:
    current = await get_staff(store, staff_id)
    member = _build(staff_id, data, current.employee_id, current.created_at)
    await store.set(join_path("staff", staff_id), member.to_record(exclude={"id"}))

    logger.info("staff_updated", staff_id=staff_id)
    return member


async def delete_staff(store: DocumentStore, staff_id: str) -> None:
    await get_staff(store, staff_id)
    await store.remove(join_path("staff", staff_id))
    logger.info("staff_deleted", staff_id=staff_id)

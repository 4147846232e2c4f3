"""
User profile and account records.

The profile (users/{uid}) is what the rest of the site reads; its `role` is
fixed at sign-up and only changed by an explicit admin action. The account
(accounts/{uid}) holds credentials and is only read by the auth service.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import field_validator, model_validator

from app.models.base import CamelModel


class Role(str, Enum):
    ADMIN = "admin"
    BUYER = "buyer"


class UserProfile(CamelModel):
    uid: str
    email: Optional[str] = None
    full_name: str = ""
    phone_number: str = ""
    role: Optional[Role] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_phone_key(cls, data: Any) -> Any:
        # Older profile edits wrote `phoneNo` instead of `phoneNumber`
        if isinstance(data, dict) and "phoneNumber" not in data and "phoneNo" in data:
            data = {**data, "phoneNumber": data["phoneNo"]}
        return data

    @field_validator("role", mode="before")
    @classmethod
    def _known_role(cls, value: Any) -> Any:
        return value if value in {r.value for r in Role} else None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Account(CamelModel):
    uid: str
    email: str
    hashed_password: str
    created_at: str

    def __repr__(self) -> str:
        return f"<Account(uid={self.uid}, email={self.email})>"

"""
Pydantic schemas for sign-up, sign-in and profile requests/responses.
"""

import re
from typing import Optional

from pydantic import Field, field_validator, model_validator

from app.models.base import CamelModel
from app.models.user import Role, UserProfile

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")


def normalize_phone(value: str) -> str:
    """Strip whitespace and require exactly 10 digits."""
    digits = re.sub(r"\s", "", value or "")
    if not PHONE_PATTERN.match(digits):
        raise ValueError("Please enter a valid 10-digit phone number")
    return digits


class UserCreate(CamelModel):
    full_name: str = Field(..., max_length=100)
    phone_number: str
    email: str
    password: str = Field(..., max_length=128)
    confirm_password: str

    @field_validator("full_name")
    @classmethod
    def _full_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name is required")
        if len(value) < 2:
            raise ValueError("Full name must be at least 2 characters")
        return value

    @field_validator("phone_number")
    @classmethod
    def _phone(cls, value: str) -> str:
        return normalize_phone(value)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value

    @model_validator(mode="after")
    def _passwords_match(self) -> "UserCreate":
        if not self.confirm_password:
            raise ValueError("Please confirm your password")
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(CamelModel):
    email: str
    password: str


class AuthResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    role: Optional[Role] = None
    redirect_to: str
    profile: Optional[UserProfile] = None


class ProfileUpdate(CamelModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone_number: Optional[str] = None

    @field_validator("phone_number")
    @classmethod
    def _phone(cls, value: Optional[str]) -> Optional[str]:
        return normalize_phone(value) if value is not None else None


class RoleUpdate(CamelModel):
    role: Role


class AccessResponse(CamelModel):
    area: str
    role: Optional[Role] = None
    allowed: bool
    redirect_to: Optional[str] = None

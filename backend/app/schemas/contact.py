"""
Pydantic schemas for the contact form.
"""

from pydantic import Field, field_validator

from app.models.base import CamelModel
from app.schemas.user import EMAIL_PATTERN


class ContactCreate(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=20)
    email: str
    message: str = Field(..., min_length=1, max_length=2000)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value


class ContactReceived(CamelModel):
    id: str
    message: str = "Message sent successfully"

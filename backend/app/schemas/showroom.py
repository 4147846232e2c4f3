"""
Pydantic schemas for showroom management.
"""

from pydantic import Field

from app.models.base import CamelModel


class ShowroomCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = ""
    phone: str = Field(..., min_length=1)
    email: str = ""
    manager: str = ""

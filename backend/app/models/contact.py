"""
Contact messages as shown on the admin contact screen.

Signed-in users leave one message each (messages/{uid}, overwritten on
resend); guests append to contactForms. Both are surfaced as ContactMessage.
"""

from enum import Enum
from typing import Optional

from app.models.base import CamelModel


class ContactSource(str, Enum):
    USER = "User"
    GUEST = "Guest"


class ContactMessage(CamelModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    created_at: Optional[str] = None
    source: ContactSource
    user_id: Optional[str] = None

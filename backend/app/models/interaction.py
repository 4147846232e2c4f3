"""
Interaction events: append-only log of what visitors do with a vehicle card.
"""

from enum import Enum
from typing import Optional

from app.models.base import CamelModel


class InteractionAction(str, Enum):
    VIEW = "view"
    LIKE = "like"
    SHARE = "share"
    CONTACT = "contact"


class InteractionEvent(CamelModel):
    id: Optional[str] = None
    user_id: Optional[str] = None  # None for guests
    feature_id: str
    action: InteractionAction
    timestamp: str

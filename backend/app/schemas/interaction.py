"""
Pydantic schemas for interaction logging.
"""

from app.models.base import CamelModel
from app.models.interaction import InteractionAction


class InteractionCreate(CamelModel):
    feature_id: str
    action: InteractionAction


"""
Shared FastAPI dependencies: the store handle and role gates.

Role gates look the role up on the caller's profile for every request, so a
role change takes effect without re-issuing tokens.
"""

from fastapi import Depends, HTTPException, status

from app.core.logging import get_logger
from app.core.security import get_current_user_id
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.models.user import Role
from app.services.access_service import load_role

logger = get_logger(__name__)


async def require_admin(
    user_id: str = Depends(get_current_user_id),
    store: DocumentStore = Depends(get_store),
) -> str:
    if await load_role(store, user_id) != Role.ADMIN:
        logger.warning("admin_required", user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user_id


async def require_buyer(
    user_id: str = Depends(get_current_user_id),
    store: DocumentStore = Depends(get_store),
) -> str:
    if await load_role(store, user_id) != Role.BUYER:
        logger.warning("buyer_required", user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Buyer account required",
        )
    return user_id

"""
Authentication endpoints: register, login and the access check.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.security import get_optional_user_id
from app.infrastructure.store import DocumentStore
from app.infrastructure.store_factory import get_store
from app.schemas.user import AccessResponse, AuthResponse, UserCreate, UserLogin
from app.services.access_service import Area, resolve_access
from app.services.auth_service import authenticate_user, register_user

router = APIRouter(tags=["Authentication"])


@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, store: DocumentStore = Depends(get_store)):
    """Register a buyer account and sign in."""
    return await register_user(store, user_data)


@router.post("/auth/login", response_model=AuthResponse)
async def login(login_data: UserLogin, store: DocumentStore = Depends(get_store)):
    """Authenticate and receive a JWT access token plus where to go next."""
    return await authenticate_user(store, login_data)


@router.get("/access", response_model=AccessResponse)
async def check_access(
    area: Area = Query(Area.PUBLIC),
    user_id: Optional[str] = Depends(get_optional_user_id),
    store: DocumentStore = Depends(get_store),
):
    """Whether the caller may enter an area of the site, and where to send them if not."""
    decision = await resolve_access(store, user_id, area)
    return AccessResponse(
        area=area.value,
        role=decision.role,
        allowed=decision.allowed,
        redirect_to=decision.redirect_to,
    )

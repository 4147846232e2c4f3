"""
Role-gated access check for the three site areas.

The decision itself (`decide_access`) is a pure function of
(authenticated, role, area). `resolve_access` adds the single profile read;
it never writes to the profile.

Decision table:

  area     | not signed in  | admin             | buyer | no/unknown role
  ---------|----------------|-------------------|-------|----------------
  public   | -              | -                 | -     | -
  admin    | sign-in page   | -                 | home  | home
  buyer    | sign-in page   | admin dashboard   | -     | home
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_access_decision
from app.infrastructure.store import DocumentStore, join_path
from app.models.user import Role, UserProfile

logger = get_logger(__name__)


class Area(str, Enum):
    PUBLIC = "public"
    ADMIN = "admin"
    BUYER = "buyer"


@dataclass(frozen=True)
class AccessDecision:
    role: Optional[Role]
    redirect_to: Optional[str]

    @property
    def allowed(self) -> bool:
        return self.redirect_to is None


def decide_access(authenticated: bool, role: Optional[Role], area: Area) -> Optional[str]:
    """Redirect target for the caller, or None when they may stay."""
    settings = get_settings()

    if area == Area.PUBLIC:
        return None
    if not authenticated:
        return settings.SIGNIN_PATH
    if area == Area.ADMIN:
        return None if role == Role.ADMIN else settings.HOME_PATH
    # Buyer area
    if role == Role.ADMIN:
        return settings.ADMIN_DASHBOARD_PATH
    if role != Role.BUYER:
        return settings.HOME_PATH
    return None


def post_login_redirect(role: Optional[Role]) -> str:
    settings = get_settings()
    return settings.ADMIN_DASHBOARD_PATH if role == Role.ADMIN else settings.BUYER_HOME_PATH


async def load_role(store: DocumentStore, user_id: str) -> Optional[Role]:
    """Role on the user's profile; None when the profile is missing or malformed."""
    raw = await store.get(join_path("users", user_id))
    if not isinstance(raw, dict):
        return None
    try:
        return UserProfile.model_validate({**raw, "uid": user_id}).role
    except ValidationError:
        logger.warning("profile_unreadable", user_id=user_id)
        return None


async def resolve_access(store: DocumentStore, user_id: Optional[str], area: Area) -> AccessDecision:
    role = await load_role(store, user_id) if user_id else None
    redirect_to = decide_access(user_id is not None, role, area)

    record_access_decision(area.value, redirect_to is not None)
    if redirect_to is not None:
        logger.info(
            "access_denied",
            user_id=user_id,
            role=role.value if role else None,
            area=area.value,
            redirect_to=redirect_to,
        )
    return AccessDecision(role=role, redirect_to=redirect_to)

"""
Authentication service handling user registration and login.

Accounts live in the document tree:

  accounts/{uid}             -> {uid, email, hashedPassword, createdAt}
  accountEmails/{emailKey}   -> uid
  loginFailures/{emailKey}   -> {count, firstFailedAt}
  users/{uid}                -> profile (role "buyer" on sign-up)

Failures are reported with provider-style codes (`auth/wrong-password`, ...)
so clients can keep a single code -> message table.
"""

import re
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, status

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.security import create_access_token, hash_password, verify_password
from app.infrastructure.store import DocumentStore, join_path
from app.models.user import Account, Role, UserProfile
from app.schemas.user import EMAIL_PATTERN, AuthResponse, UserCreate, UserLogin
from app.services.access_service import load_role, post_login_redirect

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6

AUTH_ERROR_MESSAGES = {
    "auth/user-not-found": "No account found with this email address.",
    "auth/wrong-password": "Incorrect password. Please try again.",
    "auth/invalid-email": "Please enter a valid email address.",
    "auth/too-many-requests": "Too many failed attempts. Please try again later.",
    "auth/network-request-failed": "Network error. Please check your internet connection.",
    "auth/email-already-in-use": "An account with this email already exists.",
    "auth/weak-password": "Password is too weak. Please choose a stronger password.",
}
DEFAULT_AUTH_ERROR = "Something went wrong. Please try again."

_UNSAFE_KEY_CHARS = re.compile(r"[/#$\[\]*?\\]")


def auth_error_message(code: str) -> str:
    return AUTH_ERROR_MESSAGES.get(code, DEFAULT_AUTH_ERROR)


def auth_error(code: str, status_code: int) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"code": code, "message": auth_error_message(code)},
    )


def email_key(email: str) -> str:
    """Tree key for an email address: lower-cased, '.' escaped as ','."""
    normalized = email.strip().lower()
    if not EMAIL_PATTERN.match(normalized) or _UNSAFE_KEY_CHARS.search(normalized):
        raise auth_error("auth/invalid-email", status.HTTP_400_BAD_REQUEST)
    return normalized.replace(".", ",")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def register_user(store: DocumentStore, user_data: UserCreate) -> AuthResponse:
    """
    Create the account and a buyer profile, then sign the user in.
    Raises 409 if the email is already registered.
    """
    if len(user_data.password) < MIN_PASSWORD_LENGTH:
        logger.warning("registration_failed", reason="weak_password", email=user_data.email)
        raise auth_error("auth/weak-password", status.HTTP_400_BAD_REQUEST)

    key = email_key(user_data.email)
    if await store.get(join_path("accountEmails", key)) is not None:
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        raise auth_error("auth/email-already-in-use", status.HTTP_409_CONFLICT)

    uid = uuid.uuid4().hex
    created_at = _now_iso()
    account = Account(
        uid=uid,
        email=user_data.email.strip().lower(),
        hashed_password=hash_password(user_data.password),
        created_at=created_at,
    )
    profile = UserProfile(
        uid=uid,
        email=account.email,
        full_name=user_data.full_name,
        phone_number=user_data.phone_number,
        role=Role.BUYER,
        created_at=created_at,
    )

    await store.set(join_path("accounts", uid), account.to_record())
    await store.set(join_path("accountEmails", key), uid)
    await store.set(join_path("users", uid), profile.to_record())

    logger.info("user_registered", user_id=uid, email=account.email)
    return AuthResponse(
        access_token=create_access_token(data={"sub": uid}),
        role=profile.role,
        redirect_to=post_login_redirect(profile.role),
        profile=profile,
    )


async def _failure_count(store: DocumentStore, key: str) -> int:
    settings = get_settings()
    record = await store.get(join_path("loginFailures", key))
    if not isinstance(record, dict):
        return 0
    window = settings.LOGIN_LOCKOUT_MINUTES * 60
    if time.time() - float(record.get("firstFailedAt", 0)) > window:
        return 0
    return int(record.get("count", 0))


async def _record_failure(store: DocumentStore, key: str, previous: int) -> None:
    path = join_path("loginFailures", key)
    if previous == 0:
        await store.set(path, {"count": 1, "firstFailedAt": time.time()})
    else:
        await store.update(path, {"count": previous + 1})


async def authenticate_user(store: DocumentStore, login_data: UserLogin) -> AuthResponse:
    """
    Verify credentials and return a token plus the post-login redirect.
    Raises 401 if credentials are invalid, 429 after repeated failures.
    """
    settings = get_settings()
    key = email_key(login_data.email)

    failures = await _failure_count(store, key)
    if failures >= settings.LOGIN_MAX_FAILURES:
        logger.warning("login_throttled", email=login_data.email, failures=failures)
        raise auth_error("auth/too-many-requests", status.HTTP_429_TOO_MANY_REQUESTS)

    uid: Optional[str] = await store.get(join_path("accountEmails", key))
    if not uid:
        await _record_failure(store, key, failures)
        logger.warning("login_failed", reason="user_not_found", email=login_data.email)
        raise auth_error("auth/user-not-found", status.HTTP_401_UNAUTHORIZED)

    raw_account = await store.get(join_path("accounts", uid))
    account = Account.model_validate(raw_account) if isinstance(raw_account, dict) else None
    if account is None or not verify_password(login_data.password, account.hashed_password):
        await _record_failure(store, key, failures)
        logger.warning("login_failed", reason="wrong_password", user_id=uid)
        raise auth_error("auth/wrong-password", status.HTTP_401_UNAUTHORIZED)

    if failures:
        await store.remove(join_path("loginFailures", key))

    role = await load_role(store, uid)
    logger.info("user_logged_in", user_id=uid, role=role.value if role else None)
    return AuthResponse(
        access_token=create_access_token(data={"sub": uid}),
        role=role,
        redirect_to=post_login_redirect(role),
    )

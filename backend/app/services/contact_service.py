"""
Contact form submissions and the unified admin inbox.

  messages/{uid}          latest message from a signed-in user (overwritten)
  contactForms/{pushId}   guest submissions (appended)

Older user messages used capitalised keys (FullName, Contactno, Email,
Message); both spellings are read.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from app.core.config import get_settings
from app.core.logging import get_logger
from app.infrastructure.store import DocumentStore, join_path
from app.models.contact import ContactMessage, ContactSource
from app.schemas.contact import ContactCreate
from app.services.reconciliation import parse_timestamp

logger = get_logger(__name__)


async def submit_message(store: DocumentStore, data: ContactCreate, user_id: Optional[str] = None) -> str:
    """Store a message and return its id (the uid for signed-in users)."""
    record = {
        "fullName": data.full_name.strip(),
        "phone": data.phone.strip(),
        "email": data.email,
        "message": data.message.strip(),
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    if user_id is not None:
        await store.set(join_path("messages", user_id), record)
        message_id = user_id
    else:
        message_id = await store.push("contactForms", record)

    logger.info("contact_message_received", message_id=message_id, guest=user_id is None)
    return message_id


def _text(record: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = record.get(key)
        if value:
            return str(value)
    return None


def _unify(key: str, record: Mapping[str, Any], source: ContactSource) -> ContactMessage:
    return ContactMessage(
        id=str(record.get("id") or key),
        name=_text(record, "fullName", "FullName", "name") or ("User" if source == ContactSource.USER else "Guest"),
        email=_text(record, "email", "Email"),
        phone=_text(record, "phone", "Contactno", "phoneNumber"),
        message=_text(record, "message", "Message"),
        created_at=_text(record, "createdAt"),
        source=source,
        user_id=key if source == ContactSource.USER else None,
    )


async def list_messages(
    store: DocumentStore,
    search: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[ContactMessage]:
    """User and guest messages together, most recent first."""
    limit = limit or get_settings().CONTACT_QUERY_LIMIT
    unified = []
    for path, source in (("messages", ContactSource.USER), ("contactForms", ContactSource.GUEST)):
        for key, record in (await store.get(path) or {}).items():
            if isinstance(record, Mapping):
                unified.append(_unify(key, record, source))

    if search and search.strip():
        needle = search.strip().lower()
        unified = [
            m for m in unified
            if any(needle in (value or "").lower() for value in (m.name, m.email, m.phone, m.message, m.user_id))
        ]

    unified.sort(key=lambda m: parse_timestamp(m.created_at), reverse=True)
    return unified[:limit]

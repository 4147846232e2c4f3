"""
Interaction log (interactions/{pushId}): append and query.

Push ids are time-ordered, so key order is also chronological order; the
timestamp field is still used for sorting since old clients wrote their own
keys.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_interaction
from app.infrastructure.store import DocumentStore
from app.models.interaction import InteractionEvent
from app.schemas.interaction import InteractionCreate
from app.services.reconciliation import parse_timestamp

logger = get_logger(__name__)


async def record_event(
    store: DocumentStore,
    data: InteractionCreate,
    user_id: Optional[str] = None,
) -> InteractionEvent:
    """Append one event. Guests are recorded with no userId."""
    event = InteractionEvent(
        user_id=user_id,
        feature_id=data.feature_id,
        action=data.action,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    event.id = await store.push("interactions", event.to_record(exclude={"id"}))

    record_interaction(event.action.value)
    logger.info(
        "interaction_recorded",
        event_id=event.id,
        feature_id=event.feature_id,
        action=event.action.value,
        guest=user_id is None,
    )
    return event


def parse_events(tree: Optional[dict]) -> list[InteractionEvent]:
    """Events from an `interactions` snapshot; malformed entries are dropped."""
    events = []
    for key, raw in (tree or {}).items():
        if not isinstance(raw, dict):
            continue
        try:
            events.append(InteractionEvent.model_validate({**raw, "id": key}))
        except ValidationError:
            logger.debug("interaction_skipped", event_id=key)
    return events


async def load_events(store: DocumentStore) -> list[InteractionEvent]:
    return parse_events(await store.get("interactions"))


async def latest_events(
    store: DocumentStore,
    feature_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[InteractionEvent]:
    """Most recent events first, optionally for a single vehicle."""
    limit = limit or get_settings().INTERACTION_QUERY_LIMIT
    events = await load_events(store)
    if feature_id is not None:
        events = [e for e in events if e.feature_id == feature_id]
    events.sort(key=lambda e: parse_timestamp(e.timestamp), reverse=True)
    return events[:limit]

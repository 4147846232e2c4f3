"""
Document store factory.
Configures which store backend the application uses.
"""

from typing import Optional

from app.core.config import get_settings
from app.core.logging import get_logger
from app.infrastructure.memory_store import InMemoryDocumentStore
from app.infrastructure.redis_client import RedisClient, get_redis
from app.infrastructure.redis_store import RedisDocumentStore
from app.infrastructure.store import DocumentStore

logger = get_logger(__name__)


def create_store() -> DocumentStore:
    """
    Build the configured store.

    Backend selection via STORE_BACKEND:
    - memory: in-process tree, state is lost on restart (default for development)
    - redis: shared Redis keyspace (production)
    """
    settings = get_settings()
    backend = settings.STORE_BACKEND.lower()

    if backend == "redis":
        return RedisDocumentStore(
            get_redis(),
            prefix=settings.STORE_KEY_PREFIX,
            scan_count=settings.STORE_SCAN_COUNT,
        )
    if backend != "memory":
        logger.warning("unknown_store_backend", backend=backend, fallback="memory")
    return InMemoryDocumentStore()


# Singleton instance
_store: Optional[DocumentStore] = None


def get_store() -> DocumentStore:
    """Get document store singleton. Used as a FastAPI dependency."""
    global _store
    if _store is None:
        _store = create_store()
    return _store


async def close_store() -> None:
    """Release the store on shutdown."""
    global _store
    if _store is not None:
        await _store.close()
        _store = None
    await RedisClient.close()

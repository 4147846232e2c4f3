"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .store import DocumentStore, InvalidPathError, StoreUnavailableError, join_path, validate_key
from .store_factory import close_store, get_store

__all__ = [
    'DocumentStore', 'InvalidPathError', 'StoreUnavailableError',
    'join_path', 'validate_key', 'close_store', 'get_store',
]

"""
In-process document store.

Keeps the tree as nested dicts. Values are deep-copied on the way in and out
so callers can never mutate stored state by accident. Used for local
development (STORE_BACKEND=memory) and as the store in the test suite.
"""

import copy
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional

from app.core.metrics import record_store_operation, watchers_opened
from app.infrastructure.store import (
    ChangeFeed,
    DocumentStore,
    paths_overlap,
    prune,
    split_path,
)


class InMemoryDocumentStore(DocumentStore):

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._root: dict = prune(copy.deepcopy(dict(initial or {}))) or {}
        self._feeds: list[tuple[list[str], ChangeFeed]] = []

    async def get(self, path: str) -> Any:
        record_store_operation("get")
        node: Any = self._root
        for segment in split_path(path):
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        if node == {}:
            return None
        return copy.deepcopy(node)

    async def set(self, path: str, value: Any) -> None:
        record_store_operation("set")
        segments = self.write_segments(path)
        self._write(segments, value)
        self._notify(segments)

    async def update(self, path: str, values: Mapping[str, Any]) -> None:
        record_store_operation("update")
        base = self.write_segments(path)
        for child, value in values.items():
            self._write(base + split_path(child), value)
        self._notify(base)

    async def remove(self, path: str) -> None:
        record_store_operation("remove")
        segments = self.write_segments(path)
        self._delete(segments)
        self._notify(segments)

    async def push(self, path: str, value: Any) -> str:
        record_store_operation("push")
        return await super().push(path, value)

    @asynccontextmanager
    async def changes(self, path: str) -> AsyncIterator[ChangeFeed]:
        entry = (split_path(path), ChangeFeed())
        self._feeds.append(entry)
        watchers_opened.inc()
        try:
            yield entry[1]
        finally:
            self._feeds.remove(entry)

    @property
    def watcher_count(self) -> int:
        return len(self._feeds)

    def snapshot(self) -> dict:
        """Deep copy of the whole tree."""
        return copy.deepcopy(self._root)

    def _write(self, segments: list[str], value: Any) -> None:
        value = prune(copy.deepcopy(value))
        if value is None:
            self._delete(segments)
            return
        node = self._root
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[segments[-1]] = value

    def _delete(self, segments: list[str]) -> None:
        trail = [self._root]
        node: Any = self._root
        for segment in segments[:-1]:
            node = node.get(segment) if isinstance(node, dict) else None
            if not isinstance(node, dict):
                return
            trail.append(node)
        node.pop(segments[-1], None)
        # Drop branches left empty by the delete
        for depth in range(len(segments) - 1, 0, -1):
            if trail[depth]:
                break
            trail[depth - 1].pop(segments[depth - 1], None)

    def _notify(self, segments: list[str]) -> None:
        for watched, feed in self._feeds:
            if paths_overlap(watched, segments):
                feed.notify()

    def __repr__(self) -> str:
        return f"<InMemoryDocumentStore(top_level={sorted(self._root)}, watchers={len(self._feeds)})>"


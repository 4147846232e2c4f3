"""
Document store interface.

The showroom keeps all state in a path-addressed JSON tree (cars, bookings,
users, interactions, ...). Services only ever talk to this interface, so the
backend can be swapped without touching business logic:

- InMemoryDocumentStore: single-process dict tree (development, tests)
- RedisDocumentStore: one Redis key per leaf, pub/sub change feed

Semantics follow a realtime-database tree:
  - Writing None or an empty dict removes the node.
  - Writing below a scalar replaces the scalar with a branch.
  - Readers of a path are notified when anything at, above or below it changes.
"""

import asyncio
import random
import re
import time
from abc import ABC, abstractmethod
from contextlib import suppress
from typing import Any, AsyncIterator, Mapping, Optional

_INVALID_SEGMENT = re.compile(r"[.#$\[\]*?\\]")

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class StoreUnavailableError(Exception):
    """The backing store could not be reached or failed mid-operation."""

    def __init__(self, operation: str, message: str = "Network error. Please check your internet connection."):
        super().__init__(message)
        self.operation = operation
        self.message = message


class InvalidPathError(ValueError):
    """A path or key uses characters the tree does not allow."""


def split_path(path: str) -> list[str]:
    """Split a slash-separated path into validated segments. '' is the root."""
    segments = [s for s in path.strip("/").split("/") if s]
    for segment in segments:
        if _INVALID_SEGMENT.search(segment):
            raise InvalidPathError(f"Invalid path segment: {segment!r}")
    return segments


def validate_key(key: str) -> str:
    """A single child key: non-empty, no slash, no reserved characters."""
    if not key or "/" in key or _INVALID_SEGMENT.search(key):
        raise InvalidPathError(f"Invalid key: {key!r}")
    return key


def join_path(*parts: str) -> str:
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


def paths_overlap(a: list[str], b: list[str]) -> bool:
    """True when one path is an ancestor of (or equal to) the other."""
    shorter = min(len(a), len(b))
    return a[:shorter] == b[:shorter]


def prune(value: Any) -> Any:
    """Drop None leaves and empty branches, the way the tree stores values."""
    if isinstance(value, Mapping):
        pruned = {}
        for key, child in value.items():
            key = validate_key(str(key))
            child = prune(child)
            if child is not None:
                pruned[key] = child
        return pruned or None
    return value


class PushIdGenerator:
    """
    Chronologically sortable 20-character keys.

    8 characters of millisecond timestamp followed by 12 random characters;
    within the same millisecond the random part is incremented so keys stay
    strictly increasing.
    """

    def __init__(self) -> None:
        self._last_ts = -1
        self._last_rand = [0] * 12

    def __call__(self) -> str:
        now = int(time.time() * 1000)
        duplicate = now == self._last_ts
        self._last_ts = now

        ts_chars = []
        for _ in range(8):
            ts_chars.append(PUSH_CHARS[now % 64])
            now //= 64
        ts_part = "".join(reversed(ts_chars))

        if not duplicate:
            self._last_rand = [random.randrange(64) for _ in range(12)]
        else:
            i = 11
            while i >= 0 and self._last_rand[i] == 63:
                self._last_rand[i] = 0
                i -= 1
            if i >= 0:
                self._last_rand[i] += 1

        return ts_part + "".join(PUSH_CHARS[n] for n in self._last_rand)


generate_push_id = PushIdGenerator()


class ChangeFeed:
    """
    Notification queue for one watcher.

    Bursts of writes collapse into a single wake-up, since the watcher
    always re-reads the full snapshot anyway.
    """

    def __init__(self) -> None:
        # At most one pending wake-up, however slow the consumer
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._error: Optional[Exception] = None

    def notify(self) -> None:
        with suppress(asyncio.QueueFull):
            self._queue.put_nowait(None)

    def fail(self, error: Exception) -> None:
        """Wake the watcher with an error; it is raised from the next iteration."""
        self._error = error
        self.notify()

    def __aiter__(self) -> "ChangeFeed":
        return self

    async def __anext__(self) -> None:
        await self._queue.get()
        if self._error is not None:
            raise self._error
        return None

    @property
    def pending(self) -> int:
        return self._queue.qsize()


class DocumentStore(ABC):
    """
    Interface for the path-addressed JSON tree.

    Paths are slash-separated ("bookings/uid/bookingId"). Values are
    JSON-compatible: dicts, lists, strings, numbers, booleans.
    """

    @abstractmethod
    async def get(self, path: str) -> Any:
        """Return the value at path (a nested dict for branches) or None."""

    @abstractmethod
    async def set(self, path: str, value: Any) -> None:
        """Replace the node at path. None or {} removes it."""

    @abstractmethod
    async def update(self, path: str, values: Mapping[str, Any]) -> None:
        """
        Set several children of path in one operation.

        Keys may be relative paths ("status", "address/city"); children not
        named are left untouched.
        """

    @abstractmethod
    async def remove(self, path: str) -> None:
        """Delete the node at path and everything below it."""

    @abstractmethod
    def changes(self, path: str):
        """
        Async context manager yielding a ChangeFeed for path.

        Leaving the context unsubscribes.
        """

    async def push(self, path: str, value: Any) -> str:
        """Store value under a generated, time-ordered child key of path."""
        key = generate_push_id()
        await self.set(join_path(path, key), value)
        return key

    async def watch(self, path: str) -> AsyncIterator[Any]:
        """
        Yield the snapshot at path now and again after every change.

        Closing the iterator (aclose, or breaking out of `async for`)
        tears the subscription down.
        """
        async with self.changes(path) as feed:
            yield await self.get(path)
            async for _ in feed:
                yield await self.get(path)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None

    @staticmethod
    def write_segments(path: str) -> list[str]:
        segments = split_path(path)
        if not segments:
            raise ValueError("Cannot write to the root of the store")
        return segments


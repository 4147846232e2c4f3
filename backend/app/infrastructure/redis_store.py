"""
Redis-backed document store.

LAYOUT
======

Every leaf of the tree is its own Redis key holding a JSON value:

  yelocar:cars/honda-city/name        -> "\"Honda City\""
  yelocar:cars/honda-city/price       -> "1200000"
  yelocar:cars/honda-city/mainFeatures -> "[{\"name\": \"ABS\"}]"

Lists are stored whole, as a single leaf.

Why one key per leaf:
  - Two users writing different bookings never touch the same key, so the
    only overwrite race is two writers on the same booking path, where
    last-write-wins is the intended behaviour.
  - Partial updates (toggle a showroom's status) are a single SET.

Reads of a branch SCAN the key prefix and rebuild the nested dict. The
keyspace per branch is small (a catalog, one user's bookings), so SCAN cost
is negligible; the admin "all bookings" read is the largest at a few
thousand keys.

Writes run in a MULTI/EXEC pipeline together with a PUBLISH of the written
path on the change channel, which is what watchers subscribe to.
"""

import asyncio
import json
from contextlib import asynccontextmanager, suppress
from typing import Any, AsyncIterator, Mapping

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.core.logging import get_logger
from app.core.metrics import record_store_error, record_store_operation, watchers_opened
from app.infrastructure.store import (
    ChangeFeed,
    DocumentStore,
    StoreUnavailableError,
    paths_overlap,
    prune,
    split_path,
)

logger = get_logger(__name__)


def _flatten(segments: list[str], value: Any, out: dict[str, str]) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            _flatten(segments + [key], child, out)
    else:
        out["/".join(segments)] = json.dumps(value)


class RedisDocumentStore(DocumentStore):

    def __init__(self, client: redis.Redis, prefix: str = "yelocar:", scan_count: int = 200) -> None:
        self._client = client
        self._prefix = prefix
        self._scan_count = scan_count
        self._channel = f"{prefix}__changes__"

    def _key(self, segments: list[str]) -> str:
        return self._prefix + "/".join(segments)

    @asynccontextmanager
    async def _guard(self, operation: str):
        record_store_operation(operation)
        try:
            yield
        except RedisError as e:
            record_store_error(operation)
            logger.error("store_operation_failed", operation=operation, error=str(e))
            raise StoreUnavailableError(operation) from e

    async def _scan(self, pattern: str) -> list[str]:
        return [key async for key in self._client.scan_iter(match=pattern, count=self._scan_count)]

    async def get(self, path: str) -> Any:
        segments = split_path(path)
        async with self._guard("get"):
            if segments:
                raw = await self._client.get(self._key(segments))
                if raw is not None:
                    return json.loads(raw)
                base = self._key(segments) + "/"
            else:
                base = self._prefix
            keys = await self._scan(base + "*")
            if not keys:
                return None
            values = await self._client.mget(keys)

        tree: dict = {}
        for key, raw in zip(keys, values):
            if raw is None:
                # Deleted between SCAN and MGET
                continue
            parts = key[len(base):].split("/")
            node = tree
            for part in parts[:-1]:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = {}
                    node[part] = child
                node = child
            node[parts[-1]] = json.loads(raw)
        return tree or None

    async def _stage_write(
        self,
        segments: list[str],
        value: Any,
        deletes: list[str],
        leaves: dict[str, str],
    ) -> None:
        key = self._key(segments)
        deletes.append(key)
        deletes.extend(await self._scan(key + "/*"))
        # A scalar stored at an ancestor would shadow the new branch
        deletes.extend(self._key(segments[:i]) for i in range(1, len(segments)))
        value = prune(value)
        if value is not None:
            _flatten(segments, value, leaves)

    async def _commit(self, deletes: list[str], leaves: dict[str, str], changed: list[str]) -> None:
        async with self._client.pipeline(transaction=True) as pipe:
            if deletes:
                pipe.delete(*deletes)
            if leaves:
                pipe.mset({self._prefix + path: raw for path, raw in leaves.items()})
            pipe.publish(self._channel, "/".join(changed))
            await pipe.execute()

    async def set(self, path: str, value: Any) -> None:
        segments = self.write_segments(path)
        deletes: list[str] = []
        leaves: dict[str, str] = {}
        async with self._guard("set"):
            await self._stage_write(segments, value, deletes, leaves)
            await self._commit(deletes, leaves, segments)

    async def update(self, path: str, values: Mapping[str, Any]) -> None:
        base = self.write_segments(path)
        deletes: list[str] = []
        leaves: dict[str, str] = {}
        async with self._guard("update"):
            for child, value in values.items():
                await self._stage_write(base + split_path(child), value, deletes, leaves)
            await self._commit(deletes, leaves, base)

    async def remove(self, path: str) -> None:
        segments = self.write_segments(path)
        async with self._guard("remove"):
            key = self._key(segments)
            await self._commit([key, *await self._scan(key + "/*")], {}, segments)

    async def push(self, path: str, value: Any) -> str:
        record_store_operation("push")
        return await super().push(path, value)

    @asynccontextmanager
    async def changes(self, path: str) -> AsyncIterator[ChangeFeed]:
        watched = split_path(path)
        feed = ChangeFeed()
        pubsub = self._client.pubsub()
        async with self._guard("subscribe"):
            await pubsub.subscribe(self._channel)

        async def relay() -> None:
            try:
                async for message in pubsub.listen():
                    if message.get("type") != "message":
                        continue
                    if paths_overlap(watched, split_path(message["data"])):
                        feed.notify()
            except RedisError as e:
                record_store_error("subscribe")
                logger.error("store_watch_failed", path=path, error=str(e))
                feed.fail(StoreUnavailableError("subscribe"))

        task = asyncio.create_task(relay())
        watchers_opened.inc()
        try:
            yield feed
        finally:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
            with suppress(RedisError):
                await pubsub.unsubscribe(self._channel)
            await pubsub.aclose()

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning("store_ping_failed", error=str(e))
            return False

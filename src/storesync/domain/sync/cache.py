"""Per-run memo of reference key to store id lookups."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from storesync.domain.model import ResourceKind
    from storesync.domain.ports import RecordStore

log = getLogger(__name__)

type CacheKey = tuple[ResourceKind, str]
type Pending = dict[str, asyncio.Future[str | None]]


class ReferenceCache:
    """Memoises ``(kind, key) -> id | None`` for the lifetime of one sync run.

    Misses are cached too. Every key gets its entry before the store is asked,
    both for single lookups and for keys reserved for a batch query, so
    concurrent demands for one key share a single store call per run.
    A later ``put`` replaces a cached miss.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._entries: dict[CacheKey, asyncio.Future[str | None]] = {}

    def put(self, kind: ResourceKind, key: str, id_: str) -> None:
        future = asyncio.get_running_loop().create_future()
        future.set_result(id_)
        self._entries[(kind, key)] = future

    def reserve(self, kind: ResourceKind, keys: Iterable[str]) -> Pending:
        """Claim the keys nobody has asked for yet, ahead of one batch query.

        The returned entries must be settled with ``fulfil`` or ``abandon``;
        until then other demands for those keys wait on them.
        """

        loop = asyncio.get_running_loop()
        pending: Pending = {}
        for key in dict.fromkeys(keys):
            if (kind, key) in self._entries:
                continue
            future: asyncio.Future[str | None] = loop.create_future()
            self._entries[(kind, key)] = future
            pending[key] = future
        return pending

    def fulfil(self, pending: Pending, found: Mapping[str, str]) -> None:
        """Settle reserved keys; keys absent from ``found`` become misses."""
        for key, future in pending.items():
            if not future.done():
                future.set_result(found.get(key))

    def abandon(self, kind: ResourceKind, pending: Pending, exc: Exception) -> None:
        """Fail reserved keys and forget them so a later demand asks again."""
        for key, future in pending.items():
            self._forget(kind, key, future)
            if not future.done():
                future.set_exception(exc)
                # waiters re-raise it; silence "exception was never retrieved"
                future.exception()

    async def get_or_lookup(self, kind: ResourceKind, key: str) -> str | None:
        entry = self._entries.get((kind, key))
        if entry is not None:
            return await asyncio.shield(entry)

        future: asyncio.Future[str | None] = asyncio.get_running_loop().create_future()
        self._entries[(kind, key)] = future
        try:
            id_ = await self._store.lookup_id_by_key(kind, key)
        except Exception as exc:
            self.abandon(kind, {key: future}, exc)
            raise
        log.debug("Resolved %s '%s' to %s", kind, key, id_)
        future.set_result(id_)
        return id_

    def _forget(self, kind: ResourceKind, key: str, future: asyncio.Future[str | None]) -> None:
        # a put() in the meantime owns the entry now
        if self._entries.get((kind, key)) is future:
            del self._entries[(kind, key)]

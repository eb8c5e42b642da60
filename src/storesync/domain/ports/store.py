"""Port for the remote record store the sync converges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storesync.domain.model import Draft, Record, ResourceKind, UpdateAction


class StoreError(RuntimeError):
    """Raised by store adapters for transport or store-side failures."""


@dataclass(frozen=True, slots=True)
class KeyPredicate:
    """Query predicate matching records whose external key is in ``keys``."""

    keys: frozenset[str]

    @classmethod
    def of(cls, keys: Sequence[str]) -> KeyPredicate:
        return cls(frozenset(keys))

    def sorted_keys(self) -> list[str]:
        return sorted(self.keys)


@runtime_checkable
class RecordStore(Protocol):
    """Asynchronous record-store client used by the sync engine.

    ``lookup_id_by_key`` must be idempotent and side-effect free; it backs the
    reference cache for every referenced kind, including kinds that are never
    synchronised themselves (product types, custom types, ...).
    """

    async def lookup_id_by_key(self, kind: ResourceKind, key: str) -> str | None: ...

    async def get_by_key(self, kind: ResourceKind, key: str) -> Record | None: ...

    async def query_page(
        self,
        kind: ResourceKind,
        predicate: KeyPredicate,
        *,
        offset: int,
        limit: int,
    ) -> list[Record]: ...

    async def create(self, kind: ResourceKind, draft: Draft) -> Record: ...

    async def update(self, record: Record, actions: Sequence[UpdateAction]) -> Record: ...

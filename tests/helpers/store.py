"""In-memory record store and draft builders for sync tests."""

from __future__ import annotations

from dataclasses import fields, replace
from itertools import count
from typing import TYPE_CHECKING, Any

from storesync.domain.model import (
    Category,
    CategoryDraft,
    Channel,
    InventoryEntry,
    Product,
    Reference,
    ResourceKind,
)
from storesync.domain.ports import RecordStore, StoreError
from storesync.domain.sync import apply_actions

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storesync.domain.model import Draft, Record, UpdateAction
    from storesync.domain.ports import KeyPredicate

_RECORD_TYPES: dict[ResourceKind, type[Any]] = {
    ResourceKind.CATEGORY: Category,
    ResourceKind.PRODUCT: Product,
    ResourceKind.CHANNEL: Channel,
    ResourceKind.INVENTORY_ENTRY: InventoryEntry,
}


class FakeRecordStore(RecordStore):
    """Record store keeping records in dictionaries and counting every call.

    Updates are executed with the real action applier so that a second sync
    run sees exactly what the first run produced.
    """

    def __init__(self) -> None:
        self.records: dict[str, Record] = {}
        self.kinds: dict[str, ResourceKind] = {}
        self.keys: dict[tuple[ResourceKind, str], str] = {}
        self.lookups: list[tuple[ResourceKind, str]] = []
        self.queries: list[tuple[ResourceKind, frozenset[str], int, int]] = []
        self.created: list[Draft] = []
        self.updates: list[tuple[Record, list[UpdateAction]]] = []
        self.fail_create: set[str] = set()
        self.fail_update: set[str] = set()
        self.fail_queries: set[ResourceKind] = set()
        self._ids = count(1)

    def add_key(self, kind: ResourceKind, key: str, id_: str | None = None) -> str:
        """Register a referencable resource that is never synchronised itself."""
        resolved_id = id_ or f"id-{key}"
        self.keys[(kind, key)] = resolved_id
        return resolved_id

    def add(self, kind: ResourceKind, record: Record) -> Record:
        self.records[record.id] = record
        self.kinds[record.id] = kind
        if record.external_key is not None:
            self.keys[(kind, record.external_key)] = record.id
        return record

    def get(self, kind: ResourceKind, key: str) -> Record | None:
        id_ = self.keys.get((kind, key))
        return self.records.get(id_) if id_ is not None else None

    async def lookup_id_by_key(self, kind: ResourceKind, key: str) -> str | None:
        self.lookups.append((kind, key))
        return self.keys.get((kind, key))

    async def get_by_key(self, kind: ResourceKind, key: str) -> Record | None:
        return self.get(kind, key)

    async def query_page(
        self,
        kind: ResourceKind,
        predicate: KeyPredicate,
        *,
        offset: int,
        limit: int,
    ) -> list[Record]:
        self.queries.append((kind, predicate.keys, offset, limit))
        if kind in self.fail_queries:
            raise StoreError(f"query on {kind} failed")
        matches = sorted(
            (
                record
                for id_, record in self.records.items()
                if self.kinds[id_] is kind and record.external_key in predicate.keys
            ),
            key=lambda record: record.external_key or "",
        )
        return matches[offset : offset + limit]

    async def create(self, kind: ResourceKind, draft: Draft) -> Record:
        self.created.append(draft)
        if draft.external_key in self.fail_create:
            raise StoreError(f"create of {draft.external_key} rejected")
        values = {field.name: getattr(draft, field.name) for field in fields(draft)}
        record = _RECORD_TYPES[kind](id=f"gen-{next(self._ids)}", version=1, **values)
        return self.add(kind, record)

    async def update(self, record: Record, actions: Sequence[UpdateAction]) -> Record:
        self.updates.append((record, list(actions)))
        if record.external_key in self.fail_update:
            raise StoreError(f"update of {record.external_key} rejected")
        stored = self.records[record.id]
        if stored.version != record.version:
            raise StoreError(f"version conflict on {record.id}")
        updated = replace(apply_actions(stored, actions), version=stored.version + 1)
        return self.add(self.kinds[record.id], updated)


def category_ref(key: str) -> Reference:
    return Reference.of_key(ResourceKind.CATEGORY, key)


def category_draft(key: str | None, name: str = "Shoes", **kwargs: Any) -> CategoryDraft:
    slug = kwargs.pop("slug", {"en": (key or "no-key").lower()})
    return CategoryDraft(key=key, name={"en": name}, slug=slug, **kwargs)


def category_record(
    key: str, name: str = "Shoes", *, id_: str | None = None, **kwargs: Any
) -> Category:
    slug = kwargs.pop("slug", {"en": key.lower()})
    return Category(id=id_ or f"id-{key}", key=key, name={"en": name}, slug=slug, **kwargs)

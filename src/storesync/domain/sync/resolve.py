"""Replace caller keys on draft references with store ids.

Each resolver declares its reference fields once. The generic
``ReferenceResolver`` walks the declarations concurrently, collects every
failure of a draft and raises them together as one
``ReferenceResolutionError``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from storesync.domain.model import (
    CategoryDraft,
    ChannelDraft,
    CustomFields,
    Draft,
    InventoryEntryDraft,
    ProductDraft,
    Reference,
    ResourceKind,
)
from storesync.domain.ports import KeyPredicate

from .errors import InvalidReferenceKeyError, ReferenceFailure, ReferenceResolutionError
from .keys import key_from_reference
from .query import query_all

if TYPE_CHECKING:
    from storesync.config.sync import SyncOptions
    from storesync.domain.model import Record
    from storesync.domain.ports import RecordStore

    from .cache import ReferenceCache
    from .statistics import SyncReporter

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SingleReference:
    """Draft field holding at most one reference to ``kind``."""

    name: str
    kind: ResourceKind
    required: bool = True


@dataclass(frozen=True, slots=True)
class ReferenceSet:
    """Draft field holding a tuple of references to ``kind``; never required."""

    name: str
    kind: ResourceKind


@dataclass(frozen=True, slots=True)
class CustomTypeReference:
    """The custom type reference nested in a draft's ``custom`` field."""

    name: str = "custom"


type ReferenceField = SingleReference | ReferenceSet | CustomTypeReference


@dataclass(slots=True)
class FieldResolution:
    name: str
    value: object = None
    changed: bool = False
    failures: list[ReferenceFailure] = field(default_factory=list[ReferenceFailure])


class ReferenceResolver[D: Draft]:
    """Resolve the declared reference fields of one draft kind."""

    kind: ClassVar[ResourceKind]
    fields: ClassVar[tuple[ReferenceField, ...]] = ()

    def __init__(
        self,
        store: RecordStore,
        cache: ReferenceCache,
        options: SyncOptions,
        reporter: SyncReporter,
    ) -> None:
        self._store = store
        self._cache = cache
        self._options = options
        self._reporter = reporter

    async def resolve(self, draft: D) -> D:
        resolutions = await asyncio.gather(
            *(self._resolve_field(draft, declared) for declared in self.fields)
        )
        failures = tuple(failure for item in resolutions for failure in item.failures)
        if failures:
            raise ReferenceResolutionError(draft.external_key, failures)
        changes = {item.name: item.value for item in resolutions if item.changed}
        resolved = replace(draft, **changes) if changes else draft
        return self.resolve_dependent(resolved)

    def resolve_dependent(self, draft: D) -> D:
        """Hook for fields that depend on already resolved references."""
        return draft

    async def _resolve_field(self, draft: D, declared: ReferenceField) -> FieldResolution:
        match declared:
            case SingleReference():
                return await self._resolve_single(draft, declared)
            case ReferenceSet():
                return await self._resolve_set(draft, declared)
            case CustomTypeReference():
                return await self._resolve_custom(draft, declared)

    async def _resolve_single(self, draft: D, declared: SingleReference) -> FieldResolution:
        reference: Reference | None = getattr(draft, declared.name)
        if reference is None or reference.is_resolved:
            return FieldResolution(declared.name)
        outcome = await self._lookup(declared.name, declared.kind, reference)
        if isinstance(outcome, ReferenceFailure):
            return FieldResolution(declared.name, failures=[outcome])
        if outcome is None:
            if declared.required:
                failure = _not_found(declared.name, declared.kind, reference.key)
                return FieldResolution(declared.name, failures=[failure])
            self._reporter.warn(
                f"{declared.kind.label.capitalize()} with key '{reference.key}' referenced by "
                f"{self.kind.label} with key:'{draft.external_key}' was not found. "
                f"The {declared.name} reference is left unresolved."
            )
            return FieldResolution(declared.name)
        return FieldResolution(declared.name, reference.resolved(outcome), changed=True)

    async def _resolve_custom(self, draft: D, declared: CustomTypeReference) -> FieldResolution:
        custom: CustomFields | None = getattr(draft, declared.name)
        if custom is None or custom.type.is_resolved:
            return FieldResolution(declared.name)
        outcome = await self._lookup(declared.name, ResourceKind.TYPE, custom.type)
        if isinstance(outcome, ReferenceFailure):
            return FieldResolution(declared.name, failures=[outcome])
        if outcome is None:
            failure = _not_found(declared.name, ResourceKind.TYPE, custom.type.key)
            return FieldResolution(declared.name, failures=[failure])
        return FieldResolution(
            declared.name, replace(custom, type=custom.type.resolved(outcome)), changed=True
        )

    async def _resolve_set(self, draft: D, declared: ReferenceSet) -> FieldResolution:
        references: tuple[Reference, ...] = getattr(draft, declared.name)
        keyed: list[tuple[Reference, str | None]] = []
        for reference in references:
            if reference.is_resolved:
                keyed.append((reference, None))
                continue
            try:
                key = key_from_reference(reference, allow_uuid_keys=self._options.allow_uuid_keys)
            except InvalidReferenceKeyError as exc:
                self._reporter.error(
                    f"Dropped invalid {declared.name} reference on {self.kind.label} "
                    f"with key:'{draft.external_key}'. Reason: {exc}",
                    exc,
                )
                continue
            keyed.append((reference, key))

        pending = [key for _, key in keyed if key is not None]
        if not pending:
            return FieldResolution(declared.name, tuple(ref for ref, _ in keyed), changed=True)
        try:
            await self._prefetch(declared.kind, pending)
            ids = await asyncio.gather(
                *(self._cache.get_or_lookup(declared.kind, key) for key in pending)
            )
        except Exception as exc:  # noqa: BLE001
            failure = ReferenceFailure(declared.name, ", ".join(pending), f"lookup failed: {exc}")
            return FieldResolution(declared.name, failures=[failure])

        found = dict(zip(pending, ids, strict=True))
        resolved: list[Reference] = []
        for reference, key in keyed:
            if key is None:
                resolved.append(reference)
                continue
            id_ = found[key]
            if id_ is None:
                self._reporter.warn(
                    f"{declared.kind.label.capitalize()} with key '{key}' referenced by "
                    f"{self.kind.label} with key:'{draft.external_key}' was not found. "
                    f"The {declared.name} entry is left unresolved."
                )
                resolved.append(reference)
            else:
                resolved.append(reference.resolved(id_))
        return FieldResolution(declared.name, tuple(resolved), changed=True)

    async def _prefetch(self, kind: ResourceKind, keys: list[str]) -> None:
        pending = self._cache.reserve(kind, keys)
        if not pending:
            return

        def index(page: list[Record]) -> dict[str, str]:
            return {
                record.external_key: record.id
                for record in page
                if record.external_key is not None
            }

        try:
            pages = await query_all(self._store, kind, KeyPredicate.of(list(pending)), index)
        except Exception as exc:
            self._cache.abandon(kind, pending, exc)
            raise
        found = {key: id_ for page in pages for key, id_ in page.items()}
        log.debug("Prefetched %d of %d %s keys", len(found), len(pending), kind)
        self._cache.fulfil(pending, found)

    async def _lookup(
        self, name: str, kind: ResourceKind, reference: Reference
    ) -> str | ReferenceFailure | None:
        try:
            key = key_from_reference(reference, allow_uuid_keys=self._options.allow_uuid_keys)
        except InvalidReferenceKeyError as exc:
            return ReferenceFailure(name, reference.key, str(exc))
        try:
            return await self._cache.get_or_lookup(kind, key)
        except Exception as exc:  # noqa: BLE001
            return ReferenceFailure(name, key, f"lookup failed: {exc}")


def _not_found(name: str, kind: ResourceKind, key: str | None) -> ReferenceFailure:
    return ReferenceFailure(name, key, f"{kind.label} with key '{key}' was not found")


class CategoryReferenceResolver(ReferenceResolver[CategoryDraft]):
    kind = ResourceKind.CATEGORY
    fields = (
        SingleReference("parent", ResourceKind.CATEGORY),
        CustomTypeReference(),
    )


class ProductReferenceResolver(ReferenceResolver[ProductDraft]):
    kind = ResourceKind.PRODUCT
    fields = (
        SingleReference("product_type", ResourceKind.PRODUCT_TYPE),
        ReferenceSet("categories", ResourceKind.CATEGORY),
        SingleReference("tax_category", ResourceKind.TAX_CATEGORY, required=False),
        SingleReference("state", ResourceKind.STATE, required=False),
    )

    def resolve_dependent(self, draft: ProductDraft) -> ProductDraft:
        """Re-key category order hints from category keys to resolved ids."""

        if not draft.category_order_hints:
            return draft
        ids_by_key = {
            category.key: category.id
            for category in draft.categories
            if category.key is not None and category.id is not None
        }
        hints = {
            ids_by_key.get(category, category): hint
            for category, hint in draft.category_order_hints.items()
        }
        return replace(draft, category_order_hints=hints)


class ChannelReferenceResolver(ReferenceResolver[ChannelDraft]):
    kind = ResourceKind.CHANNEL
    fields = (CustomTypeReference(),)


class InventoryEntryReferenceResolver(ReferenceResolver[InventoryEntryDraft]):
    kind = ResourceKind.INVENTORY_ENTRY
    fields = (
        SingleReference("supply_channel", ResourceKind.CHANNEL),
        CustomTypeReference(),
    )

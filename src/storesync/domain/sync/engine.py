"""Drive drafts through resolve, fetch, diff and apply.

Each draft moves ``received -> references resolved -> fetched`` and ends as
created, updated, up to date or failed. A failure is reported through the
error callback and recorded in the statistics; it never stops the run.
Only ``UnsupportedResourceTypeError`` escapes, as a misconfiguration.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Any

from storesync.config.sync import SyncOptions
from storesync.domain.model import Category, Channel, InventoryEntry, ResourceKind
from storesync.domain.ports import KeyPredicate

from .cache import ReferenceCache
from .diff import build_actions, custom_action_builder_for_type
from .errors import CreateError, FetchError, MissingExternalKeyError, SyncError, UpdateError
from .query import fetch_all
from .resolve import (
    CategoryReferenceResolver,
    ChannelReferenceResolver,
    InventoryEntryReferenceResolver,
    ProductReferenceResolver,
    ReferenceResolver,
)
from .statistics import SyncReporter, SyncStatistics, SyncStatisticsCollector

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from storesync.domain.model import (
        CategoryDraft,
        ChannelDraft,
        Draft,
        InventoryEntryDraft,
        ProductDraft,
        Record,
        UpdateAction,
    )
    from storesync.domain.ports import RecordStore

    from .errors import StageError

    type ResolverFactory = Callable[
        [RecordStore, ReferenceCache, SyncOptions, SyncReporter], ReferenceResolver[Any]
    ]
    type DiffBuilder = Callable[[Any, Any, SyncOptions], list[UpdateAction]]

log = getLogger(__name__)


class _BatchRecords:
    """Existing records of one batch, fetched once on first demand."""

    def __init__(self, store: RecordStore, kind: ResourceKind, keys: Sequence[str]) -> None:
        self._store = store
        self._kind = kind
        self._keys = keys
        self._fetch: asyncio.Future[dict[str, Record]] | None = None
        self._written: dict[str, Record] = {}

    async def get(self, key: str) -> Record | None:
        if key in self._written:
            return self._written[key]
        if self._fetch is None:
            self._fetch = asyncio.ensure_future(self._fetch_records())
        records = await asyncio.shield(self._fetch)
        return records.get(key)

    def remember(self, record: Record) -> None:
        if record.external_key is not None:
            self._written[record.external_key] = record

    async def _fetch_records(self) -> dict[str, Record]:
        records = await fetch_all(self._store, self._kind, KeyPredicate.of(self._keys))
        log.debug(
            "Fetched %d existing %s records for %d keys", len(records), self._kind, len(self._keys)
        )
        return {
            record.external_key: record for record in records if record.external_key is not None
        }


class _SyncRun:
    """State owned by one ``ResourceSync.sync_async`` invocation."""

    def __init__(self, sync: ResourceSync[Any]) -> None:
        self.kind = sync.kind
        self.store = sync.store
        self.options = sync.options
        self.diff_builder = sync.diff_builder
        self.statistics = SyncStatisticsCollector(sync.kind)
        self.reporter = SyncReporter(sync.options, self.statistics)
        self.cache = ReferenceCache(sync.store)
        self.resolver = sync.resolver_factory(sync.store, self.cache, sync.options, self.reporter)
        self.semaphore = asyncio.Semaphore(sync.options.max_concurrency)

    async def run(self, drafts: list[Draft | None]) -> SyncStatistics:
        batch_size = self.options.batch_size
        for start in range(0, len(drafts), batch_size):
            batch = drafts[start : start + batch_size]
            keys = [
                key
                for draft in batch
                if draft is not None and (key := draft.external_key) and key.strip()
            ]
            records = _BatchRecords(self.store, self.kind, keys)
            await asyncio.gather(*(self._guarded(draft, records) for draft in batch))
            log.info(
                "Processed %s batch %d (%d/%d drafts)",
                self.kind.label,
                start // batch_size + 1,
                min(start + batch_size, len(drafts)),
                len(drafts),
            )
        statistics = self.statistics.build()
        log.info(statistics.report_message)
        return statistics

    async def _guarded(self, draft: Draft | None, records: _BatchRecords) -> None:
        async with self.semaphore:
            await self._sync_draft(draft, records)

    async def _sync_draft(self, draft: Draft | None, records: _BatchRecords) -> None:
        label = self.kind.label
        if draft is None:
            self.reporter.fail(f"{label.capitalize()} draft is null.")
            return
        key = draft.external_key
        if key is None or not key.strip():
            message = f"{label.capitalize()} draft doesn't have a key."
            self.reporter.fail(message, MissingExternalKeyError(message))
            return

        try:
            resolved = await self.resolver.resolve(draft)
        except SyncError as exc:
            self.reporter.fail(
                f"Failed to resolve references on {label} with key:'{key}'. Reason: {exc}", exc
            )
            return

        try:
            existing = await records.get(key)
        except Exception as exc:  # noqa: BLE001
            self._fail(FetchError, f"Failed to fetch {label} with key:'{key}'. Reason: {exc}", exc)
            return

        if existing is None:
            await self._create(key, resolved, records)
        else:
            await self._update(key, existing, resolved, records)

    async def _create(self, key: str, draft: Draft, records: _BatchRecords) -> None:
        try:
            record = await self.store.create(self.kind, draft)
        except Exception as exc:  # noqa: BLE001
            message = f"Failed to create {self.kind.label} with key:'{key}'. Reason: {exc}"
            self._fail(CreateError, message, exc)
            return
        self.cache.put(self.kind, key, record.id)
        records.remember(record)
        self.statistics.record_created()

    async def _update(
        self, key: str, existing: Record, draft: Draft, records: _BatchRecords
    ) -> None:
        actions = self.diff_builder(existing, draft, self.options)
        if not actions:
            self.statistics.record_up_to_date()
            return
        log.debug("Updating %s '%s' with %s", self.kind.label, key, [a.action for a in actions])
        try:
            record = await self.store.update(existing, actions)
        except Exception as exc:  # noqa: BLE001
            message = f"Failed to update {self.kind.label} with key:'{key}'. Reason: {exc}"
            self._fail(UpdateError, message, exc)
            return
        records.remember(record)
        self.statistics.record_updated()

    def _fail(self, error_type: type[StageError], message: str, cause: Exception) -> None:
        error = error_type(message, cause=cause)
        error.__cause__ = cause
        self.reporter.fail(message, error)


class ResourceSync[D: Draft]:
    """Synchronise drafts of one resource kind against a record store.

    A new reference cache and statistics collector are created for every
    ``sync`` call. ``custom_fields_of`` names the record type whose custom
    fields are diffed; it is checked here so a kind without a custom-field
    action builder fails before any draft is processed.
    """

    def __init__(
        self,
        *,
        kind: ResourceKind,
        store: RecordStore,
        resolver_factory: ResolverFactory,
        options: SyncOptions | None = None,
        diff_builder: DiffBuilder = build_actions,
        custom_fields_of: type[Record] | None = None,
    ) -> None:
        if custom_fields_of is not None:
            custom_action_builder_for_type(custom_fields_of)
        self.kind = kind
        self.store = store
        self.resolver_factory = resolver_factory
        self.options = options or SyncOptions()
        self.diff_builder = diff_builder

    def sync(self, drafts: Iterable[D | None]) -> SyncStatistics:
        """Run the sync on a fresh event loop; use ``sync_async`` inside one."""
        return asyncio.run(self.sync_async(drafts))

    async def sync_async(self, drafts: Iterable[D | None]) -> SyncStatistics:
        return await _SyncRun(self).run(list(drafts))


def category_sync(
    store: RecordStore, options: SyncOptions | None = None
) -> ResourceSync[CategoryDraft]:
    return ResourceSync(
        kind=ResourceKind.CATEGORY,
        store=store,
        resolver_factory=CategoryReferenceResolver,
        options=options,
        custom_fields_of=Category,
    )


def product_sync(
    store: RecordStore, options: SyncOptions | None = None
) -> ResourceSync[ProductDraft]:
    return ResourceSync(
        kind=ResourceKind.PRODUCT,
        store=store,
        resolver_factory=ProductReferenceResolver,
        options=options,
    )


def channel_sync(
    store: RecordStore, options: SyncOptions | None = None
) -> ResourceSync[ChannelDraft]:
    return ResourceSync(
        kind=ResourceKind.CHANNEL,
        store=store,
        resolver_factory=ChannelReferenceResolver,
        options=options,
        custom_fields_of=Channel,
    )


def inventory_entry_sync(
    store: RecordStore, options: SyncOptions | None = None
) -> ResourceSync[InventoryEntryDraft]:
    return ResourceSync(
        kind=ResourceKind.INVENTORY_ENTRY,
        store=store,
        resolver_factory=InventoryEntryReferenceResolver,
        options=options,
        custom_fields_of=InventoryEntry,
    )


def sync_for(
    kind: ResourceKind, store: RecordStore, options: SyncOptions | None = None
) -> ResourceSync[Any]:
    """Return the sync for one of the synchronisable kinds."""

    match kind:
        case ResourceKind.CATEGORY:
            return category_sync(store, options)
        case ResourceKind.PRODUCT:
            return product_sync(store, options)
        case ResourceKind.CHANNEL:
            return channel_sync(store, options)
        case ResourceKind.INVENTORY_ENTRY:
            return inventory_entry_sync(store, options)
        case _:
            raise ValueError(f"{kind.label} records cannot be synchronised")

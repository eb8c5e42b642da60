from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from storesync.config import ConfigurationError, SyncOptions
from storesync.domain.model import (
    ChangeName,
    ChangeParent,
    ChannelDraft,
    ChannelRole,
    CustomFields,
    InventoryEntryDraft,
    Product,
    ProductDraft,
    Reference,
    ResourceKind,
)
from storesync.domain.ports import StoreError
from storesync.domain.sync import (
    CreateError,
    FetchError,
    ReferenceResolutionError,
    ResourceSync,
    UnsupportedResourceTypeError,
    UpdateError,
    category_sync,
    channel_sync,
    inventory_entry_sync,
    product_sync,
    sync_for,
)
from storesync.domain.sync.resolve import CategoryReferenceResolver, ProductReferenceResolver
from tests.helpers.store import FakeRecordStore, category_draft, category_record, category_ref

if TYPE_CHECKING:
    from storesync.domain.model import Draft, Record, UpdateAction
    from storesync.domain.ports import KeyPredicate


class _Callbacks:
    def __init__(self) -> None:
        self.errors: list[tuple[str, BaseException | None]] = []
        self.warnings: list[str] = []

    def options(self, **kwargs: object) -> SyncOptions:
        return SyncOptions(
            error_callback=self._on_error,
            warning_callback=self.warnings.append,
            **kwargs,  # type: ignore[arg-type]
        )

    def _on_error(self, message: str, cause: BaseException | None) -> None:
        self.errors.append((message, cause))


def _store_with_shoes() -> FakeRecordStore:
    store = FakeRecordStore()
    store.add(ResourceKind.CATEGORY, category_record("c0", "Root"))
    store.add(ResourceKind.CATEGORY, category_record("c1", "Shoes"))
    return store


def test_blank_key_fails_draft() -> None:
    callbacks = _Callbacks()

    statistics = category_sync(FakeRecordStore(), callbacks.options()).sync(
        [category_draft("   "), category_draft(None)]
    )

    assert statistics.failed == 2
    assert (statistics.created, statistics.updated, statistics.up_to_date) == (0, 0, 0)
    assert callbacks.errors[0][0] == "Category draft doesn't have a key."


def test_null_draft_fails() -> None:
    callbacks = _Callbacks()

    statistics = category_sync(FakeRecordStore(), callbacks.options()).sync([None])

    assert statistics.failed == 1
    assert callbacks.errors == [("Category draft is null.", None)]


def test_update_and_create_in_one_run() -> None:
    store = _store_with_shoes()

    statistics = category_sync(store).sync(
        [
            category_draft("c1", "Boots", parent=category_ref("c0")),
            category_draft("c2", "Sandals"),
        ]
    )

    assert (statistics.processed, statistics.updated, statistics.created) == (2, 1, 1)
    assert statistics.failed == 0
    [(record, actions)] = store.updates
    assert record.key == "c1"
    assert actions == [
        ChangeName({"en": "Boots"}),
        ChangeParent(Reference.of_id(ResourceKind.CATEGORY, "id-c0", key="c0")),
    ]
    assert [draft.external_key for draft in store.created] == ["c2"]
    assert statistics.report_message == (
        "Summary: 2 categories were processed in total "
        "(1 created, 1 updated, 0 up to date and 0 failed to sync)."
    )


def test_second_run_is_up_to_date() -> None:
    store = _store_with_shoes()
    drafts = [
        category_draft("c1", "Boots", parent=category_ref("c0")),
        category_draft("c2", "Sandals", parent=category_ref("c1")),
    ]
    category_sync(store).sync(drafts)
    updates, created = len(store.updates), len(store.created)

    statistics = category_sync(store).sync(drafts)

    assert statistics.up_to_date == 2
    assert (len(store.updates), len(store.created)) == (updates, created)


def test_matching_record_is_up_to_date() -> None:
    store = _store_with_shoes()

    statistics = category_sync(store).sync([category_draft("c1", "Shoes")])

    assert statistics.up_to_date == 1
    assert store.updates == []


def test_reference_key_is_looked_up_once_per_run() -> None:
    store = _store_with_shoes()
    drafts = [category_draft(f"k{n}", parent=category_ref("c0")) for n in range(5)]

    statistics = category_sync(store, SyncOptions(batch_size=2, max_concurrency=3)).sync(drafts)

    assert statistics.created == 5
    assert store.lookups == [(ResourceKind.CATEGORY, "c0")]


def test_missing_parent_fails_without_store_writes() -> None:
    callbacks = _Callbacks()
    store = _store_with_shoes()

    statistics = category_sync(store, callbacks.options()).sync(
        [category_draft("c3", parent=category_ref("missing-parent"))]
    )

    assert statistics.failed == 1
    assert store.created == []
    assert store.updates == []
    [(message, cause)] = callbacks.errors
    assert message.startswith("Failed to resolve references on category with key:'c3'.")
    assert isinstance(cause, ReferenceResolutionError)
    assert [failure.key for failure in cause.failures] == ["missing-parent"]


def test_create_failure_is_reported_and_run_continues() -> None:
    callbacks = _Callbacks()
    store = _store_with_shoes()
    store.fail_create.add("c2")

    statistics = category_sync(store, callbacks.options()).sync(
        [category_draft("c2"), category_draft("c3")]
    )

    assert (statistics.failed, statistics.created) == (1, 1)
    [(message, cause)] = callbacks.errors
    assert message.startswith("Failed to create category with key:'c2'.")
    assert isinstance(cause, CreateError)
    assert isinstance(cause.cause, StoreError)
    assert cause.__cause__ is cause.cause


def test_update_failure_is_reported() -> None:
    callbacks = _Callbacks()
    store = _store_with_shoes()
    store.fail_update.add("c1")

    statistics = category_sync(store, callbacks.options()).sync([category_draft("c1", "Boots")])

    assert statistics.failed == 1
    [(message, cause)] = callbacks.errors
    assert message.startswith("Failed to update category with key:'c1'.")
    assert isinstance(cause, UpdateError)


def test_fetch_failure_fails_every_draft_of_the_batch() -> None:
    callbacks = _Callbacks()
    store = _store_with_shoes()
    store.fail_queries.add(ResourceKind.CATEGORY)

    statistics = category_sync(store, callbacks.options()).sync(
        [category_draft("c1"), category_draft("c2")]
    )

    assert statistics.failed == 2
    assert len(store.queries) == 1
    assert all(isinstance(cause, FetchError) for _, cause in callbacks.errors)
    assert callbacks.errors[0][0].startswith("Failed to fetch category with key:'c1'.")


def test_existing_records_are_fetched_once_per_batch() -> None:
    store = _store_with_shoes()
    drafts = [category_draft(f"k{n}") for n in range(5)]

    category_sync(store, SyncOptions(batch_size=2)).sync(drafts)

    assert [keys for _, keys, _, _ in store.queries] == [
        frozenset({"k0", "k1"}),
        frozenset({"k2", "k3"}),
        frozenset({"k4"}),
    ]


def test_parent_created_earlier_in_run_is_resolved_from_cache() -> None:
    store = FakeRecordStore()

    statistics = category_sync(store, SyncOptions(batch_size=1)).sync(
        [category_draft("root"), category_draft("child", parent=category_ref("root"))]
    )

    assert statistics.created == 2
    assert store.lookups == []
    child = store.get(ResourceKind.CATEGORY, "child")
    root = store.get(ResourceKind.CATEGORY, "root")
    assert child is not None
    assert root is not None
    assert child.parent == Reference.of_id(ResourceKind.CATEGORY, root.id, key="root")


def test_duplicate_key_in_batch_is_created_once() -> None:
    store = FakeRecordStore()

    statistics = category_sync(store).sync([category_draft("c1"), category_draft("c1")])

    assert (statistics.created, statistics.up_to_date) == (1, 1)
    assert len(store.created) == 1


class _SlowStore(FakeRecordStore):
    def __init__(self) -> None:
        super().__init__()
        self.active = 0
        self.peak = 0

    async def create(self, kind: ResourceKind, draft: Draft) -> Record:
        self.active += 1
        self.peak = max(self.peak, self.active)
        await asyncio.sleep(0.01)
        self.active -= 1
        return await super().create(kind, draft)


@pytest.mark.parametrize(("max_concurrency", "peak"), [(1, 1), (3, 3)])
def test_max_concurrency_bounds_in_flight_drafts(max_concurrency: int, peak: int) -> None:
    store = _SlowStore()
    drafts = [category_draft(f"k{n}") for n in range(6)]

    statistics = category_sync(store, SyncOptions(max_concurrency=max_concurrency)).sync(drafts)

    assert statistics.created == 6
    assert store.peak == peak


def test_unsupported_custom_fields_type_fails_at_construction() -> None:
    with pytest.raises(UnsupportedResourceTypeError):
        ResourceSync(
            kind=ResourceKind.PRODUCT,
            store=FakeRecordStore(),
            resolver_factory=ProductReferenceResolver,
            custom_fields_of=Product,
        )


def test_unsupported_resource_type_escapes_the_run() -> None:
    def diff_builder(*_: object) -> list[UpdateAction]:
        raise UnsupportedResourceTypeError("Category")

    sync = ResourceSync(
        kind=ResourceKind.CATEGORY,
        store=_store_with_shoes(),
        resolver_factory=CategoryReferenceResolver,
        diff_builder=diff_builder,
    )

    with pytest.raises(UnsupportedResourceTypeError):
        sync.sync([category_draft("c1")])


def test_invalid_options_are_rejected() -> None:
    with pytest.raises(ConfigurationError):
        SyncOptions(batch_size=0)
    with pytest.raises(ConfigurationError):
        SyncOptions(max_concurrency=0)


def test_sync_for_rejects_reference_only_kinds() -> None:
    assert sync_for(ResourceKind.CHANNEL, FakeRecordStore()).kind is ResourceKind.CHANNEL
    with pytest.raises(ValueError, match="cannot be synchronised"):
        sync_for(ResourceKind.TYPE, FakeRecordStore())


def _product_store() -> FakeRecordStore:
    store = FakeRecordStore()
    store.add_key(ResourceKind.PRODUCT_TYPE, "shirt")
    store.add(ResourceKind.CATEGORY, category_record("men"))
    return store


def _product_draft(**kwargs: object) -> ProductDraft:
    return ProductDraft(
        key="p1",
        product_type=Reference.of_key(ResourceKind.PRODUCT_TYPE, "shirt"),
        name={"en": "Shirt"},
        slug={"en": "shirt"},
        categories=(category_ref("men"),),
        category_order_hints={"men": "0.2"},
        attributes={"size": "M"},
        **kwargs,  # type: ignore[arg-type]
    )


def test_missing_optional_reference_warns_and_syncs() -> None:
    callbacks = _Callbacks()

    statistics = product_sync(_product_store(), callbacks.options()).sync(
        [_product_draft(tax_category=Reference.of_key(ResourceKind.TAX_CATEGORY, "none"))]
    )

    assert statistics.created == 1
    assert len(statistics.warnings) == 1
    assert callbacks.warnings == list(statistics.warnings)
    assert "tax category with key 'none'" in statistics.warnings[0].lower()


def test_product_sync_is_idempotent() -> None:
    store = _product_store()

    first = product_sync(store).sync([_product_draft()])
    second = product_sync(store).sync([_product_draft()])

    assert first.created == 1
    assert second.up_to_date == 1
    created = store.get(ResourceKind.PRODUCT, "p1")
    assert created is not None
    assert created.category_order_hints == {"id-men": "0.2"}


def test_channel_sync_is_idempotent() -> None:
    store = FakeRecordStore()
    store.add_key(ResourceKind.TYPE, "channel-fields")
    draft = ChannelDraft(
        key="berlin",
        roles=frozenset({ChannelRole.INVENTORY_SUPPLY}),
        custom=CustomFields(
            type=Reference.of_key(ResourceKind.TYPE, "channel-fields"), fields={"city": "Berlin"}
        ),
    )

    first = channel_sync(store).sync([draft])
    second = channel_sync(store).sync([draft])

    assert (first.created, second.up_to_date) == (1, 1)


def test_inventory_entry_sync_is_idempotent() -> None:
    store = FakeRecordStore()
    store.add_key(ResourceKind.CHANNEL, "berlin")
    drafts = [
        InventoryEntryDraft(
            sku="sku-1",
            quantity_on_stock=4,
            supply_channel=Reference.of_key(ResourceKind.CHANNEL, "berlin"),
        )
    ]

    first = inventory_entry_sync(store).sync(drafts)
    changed = inventory_entry_sync(store).sync(
        [
            InventoryEntryDraft(
                sku="sku-1",
                quantity_on_stock=9,
                supply_channel=Reference.of_key(ResourceKind.CHANNEL, "berlin"),
            )
        ]
    )
    again = inventory_entry_sync(store).sync(
        [
            InventoryEntryDraft(
                sku="sku-1",
                quantity_on_stock=9,
                supply_channel=Reference.of_key(ResourceKind.CHANNEL, "berlin"),
            )
        ]
    )

    assert (first.created, changed.updated, again.up_to_date) == (1, 1, 1)


class _SuspendingQueryStore(FakeRecordStore):
    async def query_page(
        self,
        kind: ResourceKind,
        predicate: KeyPredicate,
        *,
        offset: int,
        limit: int,
    ) -> list[Record]:
        await asyncio.sleep(0)
        return await super().query_page(kind, predicate, offset=offset, limit=limit)


def test_concurrent_drafts_share_one_category_query() -> None:
    store = _SuspendingQueryStore()
    store.add_key(ResourceKind.PRODUCT_TYPE, "shirt")
    store.add(ResourceKind.CATEGORY, category_record("men"))
    drafts = [
        ProductDraft(
            key=key,
            product_type=Reference.of_key(ResourceKind.PRODUCT_TYPE, "shirt"),
            name={"en": key},
            slug={"en": key},
            categories=(category_ref("men"),),
        )
        for key in ("p1", "p2")
    ]

    statistics = product_sync(store, SyncOptions(max_concurrency=2)).sync(drafts)

    assert statistics.created == 2
    category_queries = [q for q in store.queries if q[0] is ResourceKind.CATEGORY]
    assert len(category_queries) == 1
    for key in ("p1", "p2"):
        product = store.get(ResourceKind.PRODUCT, key)
        assert isinstance(product, Product)
        assert [c.id for c in product.categories] == ["id-men"]

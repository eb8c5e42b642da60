from __future__ import annotations

import asyncio
from typing import Any

import pytest

from storesync.config import SyncOptions
from storesync.domain.model import (
    CategoryDraft,
    CustomFields,
    InventoryEntryDraft,
    ProductDraft,
    Reference,
    ResourceKind,
)
from storesync.domain.sync import ReferenceCache, ReferenceResolutionError
from storesync.domain.sync.resolve import (
    CategoryReferenceResolver,
    InventoryEntryReferenceResolver,
    ProductReferenceResolver,
    ReferenceResolver,
)
from storesync.domain.sync.statistics import SyncReporter, SyncStatisticsCollector
from tests.helpers.store import FakeRecordStore, category_draft, category_ref, category_record


def _resolve[D](
    resolver_type: type[ReferenceResolver[Any]],
    store: FakeRecordStore,
    draft: D,
    options: SyncOptions | None = None,
) -> tuple[D, SyncStatisticsCollector]:
    effective = options or SyncOptions()
    collector = SyncStatisticsCollector(resolver_type.kind)

    async def scenario() -> D:
        cache = ReferenceCache(store)
        resolver = resolver_type(store, cache, effective, SyncReporter(effective, collector))
        return await resolver.resolve(draft)

    return asyncio.run(scenario()), collector


def _product(**kwargs: Any) -> ProductDraft:
    return ProductDraft(
        key="p1",
        product_type=Reference.of_key(ResourceKind.PRODUCT_TYPE, "shirt"),
        name={"en": "Shirt"},
        slug={"en": "shirt"},
        **kwargs,
    )


def test_category_parent_is_resolved_and_keeps_its_key() -> None:
    store = FakeRecordStore()
    store.add(ResourceKind.CATEGORY, category_record("c0"))

    resolved, _ = _resolve(
        CategoryReferenceResolver, store, category_draft("c1", parent=category_ref("c0"))
    )

    assert resolved.parent == Reference.of_id(ResourceKind.CATEGORY, "id-c0", key="c0")


def test_draft_without_references_is_returned_unchanged() -> None:
    draft = category_draft("c1")

    resolved, _ = _resolve(CategoryReferenceResolver, FakeRecordStore(), draft)

    assert resolved is draft


def test_missing_parent_fails_with_its_key() -> None:
    draft = category_draft("c3", parent=category_ref("missing-parent"))

    with pytest.raises(ReferenceResolutionError) as exc:
        _resolve(CategoryReferenceResolver, FakeRecordStore(), draft)

    assert exc.value.draft_key == "c3"
    assert exc.value.fields == ("parent",)
    assert "missing-parent" in str(exc.value)


def test_uuid_parent_key_fails_unless_allowed() -> None:
    uuid_key = "6f1d0b1c-3f0a-4a8e-9c52-1f2d3e4a5b6c"
    store = FakeRecordStore()
    store.add(ResourceKind.CATEGORY, category_record(uuid_key))
    draft = category_draft("c1", parent=category_ref(uuid_key))

    with pytest.raises(ReferenceResolutionError, match="allow_uuid_keys"):
        _resolve(CategoryReferenceResolver, store, draft)

    resolved, _ = _resolve(
        CategoryReferenceResolver, store, draft, SyncOptions(allow_uuid_keys=True)
    )
    assert resolved.parent is not None
    assert resolved.parent.id == f"id-{uuid_key}"


def test_all_failures_of_a_draft_are_reported_together() -> None:
    draft = category_draft(
        "c1",
        parent=category_ref("nowhere"),
        custom=CustomFields(type=Reference.of_key(ResourceKind.TYPE, "no-type")),
    )

    with pytest.raises(ReferenceResolutionError) as exc:
        _resolve(CategoryReferenceResolver, FakeRecordStore(), draft)

    assert set(exc.value.fields) == {"parent", "custom"}
    assert "no-type" in str(exc.value)


def test_custom_type_is_resolved() -> None:
    store = FakeRecordStore()
    store.add_key(ResourceKind.TYPE, "category-extras")
    draft = category_draft(
        "c1",
        custom=CustomFields(
            type=Reference.of_key(ResourceKind.TYPE, "category-extras"), fields={"color": "red"}
        ),
    )

    resolved, _ = _resolve(CategoryReferenceResolver, store, draft)

    assert isinstance(resolved, CategoryDraft)
    assert resolved.custom is not None
    assert resolved.custom.type.id == "id-category-extras"
    assert resolved.custom.fields == {"color": "red"}


def test_product_categories_are_prefetched_in_one_query() -> None:
    store = FakeRecordStore()
    store.add_key(ResourceKind.PRODUCT_TYPE, "shirt")
    for key in ("men", "sale"):
        store.add(ResourceKind.CATEGORY, category_record(key))
    draft = _product(
        categories=(category_ref("men"), category_ref("sale")),
        category_order_hints={"men": "0.5", "sale": "0.1"},
    )

    resolved, _ = _resolve(ProductReferenceResolver, store, draft)

    assert [category.id for category in resolved.categories] == ["id-men", "id-sale"]
    assert resolved.category_order_hints == {"id-men": "0.5", "id-sale": "0.1"}
    assert len(store.queries) == 1
    assert store.lookups == [(ResourceKind.PRODUCT_TYPE, "shirt")]


def test_missing_product_category_is_kept_with_a_warning() -> None:
    store = FakeRecordStore()
    store.add_key(ResourceKind.PRODUCT_TYPE, "shirt")
    store.add(ResourceKind.CATEGORY, category_record("men"))
    warnings: list[str] = []
    draft = _product(categories=(category_ref("men"), category_ref("ghost")))

    resolved, collector = _resolve(
        ProductReferenceResolver, store, draft, SyncOptions(warning_callback=warnings.append)
    )

    assert resolved.categories[0].id == "id-men"
    assert resolved.categories[1] == category_ref("ghost")
    assert len(warnings) == 1
    assert "ghost" in warnings[0]
    assert collector.warnings == warnings


def test_invalid_product_category_key_is_dropped_and_reported() -> None:
    store = FakeRecordStore()
    store.add_key(ResourceKind.PRODUCT_TYPE, "shirt")
    store.add(ResourceKind.CATEGORY, category_record("men"))
    errors: list[str] = []
    draft = _product(categories=(category_ref("men"), category_ref(" ")))

    resolved, collector = _resolve(
        ProductReferenceResolver,
        store,
        draft,
        SyncOptions(error_callback=lambda message, _: errors.append(message)),
    )

    assert [category.key for category in resolved.categories] == ["men"]
    assert len(errors) == 1
    assert "blank" in errors[0]
    assert collector.failed == 0


def test_missing_optional_references_stay_unresolved_with_warnings() -> None:
    store = FakeRecordStore()
    store.add_key(ResourceKind.PRODUCT_TYPE, "shirt")
    draft = _product(
        tax_category=Reference.of_key(ResourceKind.TAX_CATEGORY, "standard"),
        state=Reference.of_key(ResourceKind.STATE, "draft"),
    )

    resolved, collector = _resolve(ProductReferenceResolver, store, draft)

    assert resolved.tax_category == Reference.of_key(ResourceKind.TAX_CATEGORY, "standard")
    assert resolved.state == Reference.of_key(ResourceKind.STATE, "draft")
    assert len(collector.warnings) == 2


def test_missing_product_type_fails() -> None:
    with pytest.raises(ReferenceResolutionError) as exc:
        _resolve(ProductReferenceResolver, FakeRecordStore(), _product())

    assert exc.value.fields == ("product_type",)


def test_lookup_failures_are_wrapped() -> None:
    class _BrokenStore(FakeRecordStore):
        async def lookup_id_by_key(self, kind: ResourceKind, key: str) -> str | None:
            raise ConnectionError("store unreachable")

    draft = InventoryEntryDraft(
        sku="sku-1", supply_channel=Reference.of_key(ResourceKind.CHANNEL, "berlin")
    )

    with pytest.raises(ReferenceResolutionError, match="store unreachable") as exc:
        _resolve(InventoryEntryReferenceResolver, _BrokenStore(), draft)

    assert exc.value.fields == ("supply_channel",)

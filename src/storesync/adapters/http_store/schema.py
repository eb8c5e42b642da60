"""Pydantic models describing the store's JSON payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - pydantic needs it at runtime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from storesync.domain.model import (
    Asset,
    Category,
    CategoryDraft,
    Channel,
    ChannelDraft,
    ChannelRole,
    CustomFields,
    InventoryEntry,
    InventoryEntryDraft,
    Product,
    ProductDraft,
    Reference,
    ResourceKind,
)

LocalizedPayload = dict[str, str]


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class StoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class ReferencePayload(StoreBaseModel):
    type_id: ResourceKind
    id: str | None = None
    key: str | None = None

    def to_domain(self) -> Reference:
        return Reference(type_id=self.type_id, id=self.id, key=self.key)

    @classmethod
    def from_domain(cls, reference: Reference) -> ReferencePayload:
        return cls(type_id=reference.type_id, id=reference.id, key=reference.key)


class CustomFieldsPayload(StoreBaseModel):
    type: ReferencePayload
    fields: dict[str, object] = Field(default_factory=dict)

    def to_domain(self) -> CustomFields:
        return CustomFields(type=self.type.to_domain(), fields=dict(self.fields))

    @classmethod
    def from_domain(cls, custom: CustomFields | None) -> CustomFieldsPayload | None:
        if custom is None:
            return None
        return cls(type=ReferencePayload.from_domain(custom.type), fields=dict(custom.fields))


class AssetPayload(StoreBaseModel):
    key: str
    name: LocalizedPayload
    sources: list[str] = Field(default_factory=list)

    def to_domain(self) -> Asset:
        return Asset(key=self.key, name=dict(self.name), sources=tuple(self.sources))

    @classmethod
    def from_domain(cls, asset: Asset) -> AssetPayload:
        return cls(key=asset.key, name=dict(asset.name), sources=list(asset.sources))


class KeyedPayload(StoreBaseModel):
    """Minimal view of any keyed resource, used for id lookups."""

    id: str
    key: str | None = None
    version: int = 1


class PagedQueryPayload(StoreBaseModel):
    limit: int | None = None
    offset: int = 0
    count: int = 0
    results: list[dict[str, object]] = Field(default_factory=list)


def _reference(payload: ReferencePayload | None) -> Reference | None:
    return payload.to_domain() if payload is not None else None


def _reference_payload(reference: Reference | None) -> ReferencePayload | None:
    return ReferencePayload.from_domain(reference) if reference is not None else None


def _custom(payload: CustomFieldsPayload | None) -> CustomFields | None:
    return payload.to_domain() if payload is not None else None


# Categories


class CategoryDraftPayload(StoreBaseModel):
    key: str | None = None
    name: LocalizedPayload
    slug: LocalizedPayload
    description: LocalizedPayload | None = None
    parent: ReferencePayload | None = None
    order_hint: str | None = None
    meta_title: LocalizedPayload | None = None
    meta_description: LocalizedPayload | None = None
    meta_keywords: LocalizedPayload | None = None
    assets: list[AssetPayload] = Field(default_factory=list)
    custom: CustomFieldsPayload | None = None

    _normalize_key = field_validator("key", mode="before")(_blank_to_none)

    def to_draft(self) -> CategoryDraft:
        return CategoryDraft(
            key=self.key,
            name=dict(self.name),
            slug=dict(self.slug),
            description=self.description,
            parent=_reference(self.parent),
            order_hint=self.order_hint,
            meta_title=self.meta_title,
            meta_description=self.meta_description,
            meta_keywords=self.meta_keywords,
            assets=tuple(asset.to_domain() for asset in self.assets),
            custom=_custom(self.custom),
        )

    @classmethod
    def from_draft(cls, draft: CategoryDraft) -> CategoryDraftPayload:
        return cls(
            key=draft.key,
            name=draft.name,
            slug=draft.slug,
            description=draft.description,
            parent=_reference_payload(draft.parent),
            order_hint=draft.order_hint,
            meta_title=draft.meta_title,
            meta_description=draft.meta_description,
            meta_keywords=draft.meta_keywords,
            assets=[AssetPayload.from_domain(asset) for asset in draft.assets],
            custom=CustomFieldsPayload.from_domain(draft.custom),
        )


class CategoryPayload(CategoryDraftPayload):
    id: str
    version: int = 1

    def to_record(self) -> Category:
        draft = self.to_draft()
        return Category(
            id=self.id,
            version=self.version,
            key=draft.key,
            name=draft.name,
            slug=draft.slug,
            description=draft.description,
            parent=draft.parent,
            order_hint=draft.order_hint,
            meta_title=draft.meta_title,
            meta_description=draft.meta_description,
            meta_keywords=draft.meta_keywords,
            assets=draft.assets,
            custom=draft.custom,
        )


# Products


class ProductDraftPayload(StoreBaseModel):
    key: str | None = None
    product_type: ReferencePayload
    name: LocalizedPayload
    slug: LocalizedPayload
    description: LocalizedPayload | None = None
    categories: list[ReferencePayload] = Field(default_factory=list)
    category_order_hints: dict[str, str] = Field(default_factory=dict)
    tax_category: ReferencePayload | None = None
    state: ReferencePayload | None = None
    attributes: dict[str, object] = Field(default_factory=dict)

    _normalize_key = field_validator("key", mode="before")(_blank_to_none)

    def to_draft(self) -> ProductDraft:
        return ProductDraft(
            key=self.key,
            product_type=self.product_type.to_domain(),
            name=dict(self.name),
            slug=dict(self.slug),
            description=self.description,
            categories=tuple(category.to_domain() for category in self.categories),
            category_order_hints=dict(self.category_order_hints),
            tax_category=_reference(self.tax_category),
            state=_reference(self.state),
            attributes=dict(self.attributes),
        )

    @classmethod
    def from_draft(cls, draft: ProductDraft) -> ProductDraftPayload:
        return cls(
            key=draft.key,
            product_type=ReferencePayload.from_domain(draft.product_type),
            name=draft.name,
            slug=draft.slug,
            description=draft.description,
            categories=[ReferencePayload.from_domain(ref) for ref in draft.categories],
            category_order_hints=dict(draft.category_order_hints),
            tax_category=_reference_payload(draft.tax_category),
            state=_reference_payload(draft.state),
            attributes=dict(draft.attributes),
        )


class ProductPayload(ProductDraftPayload):
    id: str
    version: int = 1

    def to_record(self) -> Product:
        draft = self.to_draft()
        return Product(
            id=self.id,
            version=self.version,
            key=draft.key,
            product_type=draft.product_type,
            name=draft.name,
            slug=draft.slug,
            description=draft.description,
            categories=draft.categories,
            category_order_hints=draft.category_order_hints,
            tax_category=draft.tax_category,
            state=draft.state,
            attributes=draft.attributes,
        )


# Channels


class ChannelDraftPayload(StoreBaseModel):
    key: str | None = None
    roles: list[ChannelRole] = Field(default_factory=list)
    name: LocalizedPayload | None = None
    description: LocalizedPayload | None = None
    custom: CustomFieldsPayload | None = None

    _normalize_key = field_validator("key", mode="before")(_blank_to_none)

    def to_draft(self) -> ChannelDraft:
        return ChannelDraft(
            key=self.key,
            roles=frozenset(self.roles),
            name=self.name,
            description=self.description,
            custom=_custom(self.custom),
        )

    @classmethod
    def from_draft(cls, draft: ChannelDraft) -> ChannelDraftPayload:
        return cls(
            key=draft.key,
            roles=sorted(draft.roles),
            name=draft.name,
            description=draft.description,
            custom=CustomFieldsPayload.from_domain(draft.custom),
        )


class ChannelPayload(ChannelDraftPayload):
    id: str
    version: int = 1

    def to_record(self) -> Channel:
        draft = self.to_draft()
        return Channel(
            id=self.id,
            version=self.version,
            key=draft.key,
            roles=draft.roles,
            name=draft.name,
            description=draft.description,
            custom=draft.custom,
        )


# Inventory entries


class InventoryEntryDraftPayload(StoreBaseModel):
    sku: str | None = None
    quantity_on_stock: int = 0
    restockable_in_days: int | None = None
    expected_delivery: datetime | None = None
    supply_channel: ReferencePayload | None = None
    custom: CustomFieldsPayload | None = None

    _normalize_sku = field_validator("sku", mode="before")(_blank_to_none)

    def to_draft(self) -> InventoryEntryDraft:
        return InventoryEntryDraft(
            sku=self.sku,
            quantity_on_stock=self.quantity_on_stock,
            restockable_in_days=self.restockable_in_days,
            expected_delivery=self.expected_delivery,
            supply_channel=_reference(self.supply_channel),
            custom=_custom(self.custom),
        )

    @classmethod
    def from_draft(cls, draft: InventoryEntryDraft) -> InventoryEntryDraftPayload:
        return cls(
            sku=draft.sku,
            quantity_on_stock=draft.quantity_on_stock,
            restockable_in_days=draft.restockable_in_days,
            expected_delivery=draft.expected_delivery,
            supply_channel=_reference_payload(draft.supply_channel),
            custom=CustomFieldsPayload.from_domain(draft.custom),
        )


class InventoryEntryPayload(InventoryEntryDraftPayload):
    id: str
    version: int = 1

    def to_record(self) -> InventoryEntry:
        draft = self.to_draft()
        return InventoryEntry(
            id=self.id,
            version=self.version,
            sku=draft.sku,
            quantity_on_stock=draft.quantity_on_stock,
            restockable_in_days=draft.restockable_in_days,
            expected_delivery=draft.expected_delivery,
            supply_channel=draft.supply_channel,
            custom=draft.custom,
        )

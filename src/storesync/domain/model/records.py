"""Current store-side representation of synchronised resources."""

# pyright: reportUnknownVariableType=false

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import ChannelRole
    from .primitives import Asset, CustomFields, JsonValue, LocalizedString
    from .references import Reference


@dataclass(frozen=True, slots=True, kw_only=True)
class Category:
    id: str
    name: LocalizedString
    slug: LocalizedString
    version: int = 1
    key: str | None = None
    description: LocalizedString | None = None
    parent: Reference | None = None
    order_hint: str | None = None
    meta_title: LocalizedString | None = None
    meta_description: LocalizedString | None = None
    meta_keywords: LocalizedString | None = None
    assets: tuple[Asset, ...] = ()
    custom: CustomFields | None = None

    @property
    def external_key(self) -> str | None:
        return self.key


@dataclass(frozen=True, slots=True, kw_only=True)
class Product:
    id: str
    product_type: Reference
    name: LocalizedString
    slug: LocalizedString
    version: int = 1
    key: str | None = None
    description: LocalizedString | None = None
    categories: tuple[Reference, ...] = ()
    category_order_hints: dict[str, str] = field(default_factory=dict)
    tax_category: Reference | None = None
    state: Reference | None = None
    attributes: dict[str, JsonValue] = field(default_factory=dict)

    @property
    def external_key(self) -> str | None:
        return self.key


@dataclass(frozen=True, slots=True, kw_only=True)
class Channel:
    id: str
    version: int = 1
    key: str | None = None
    roles: frozenset[ChannelRole] = frozenset()
    name: LocalizedString | None = None
    description: LocalizedString | None = None
    custom: CustomFields | None = None

    @property
    def external_key(self) -> str | None:
        return self.key


@dataclass(frozen=True, slots=True, kw_only=True)
class InventoryEntry:
    id: str
    version: int = 1
    sku: str | None = None
    quantity_on_stock: int = 0
    restockable_in_days: int | None = None
    expected_delivery: datetime | None = None
    supply_channel: Reference | None = None
    custom: CustomFields | None = None

    @property
    def external_key(self) -> str | None:
        return self.sku


type Record = Category | Product | Channel | InventoryEntry

"""Desired-state drafts supplied by sync callers.

Every draft exposes ``external_key``: the caller-chosen identifier used to
find the matching record in the store. It is never the store's own id.
"""

# switch off type warnings because of default_factory=dict or tuple
# pyright: reportUnknownVariableType=false

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import ChannelRole
    from .primitives import Asset, CustomFields, JsonValue, LocalizedString
    from .references import Reference


class SyncDraft(Protocol):
    """Anything the orchestrator can synchronise."""

    @property
    def external_key(self) -> str | None: ...


@dataclass(frozen=True, slots=True, kw_only=True)
class CategoryDraft:
    name: LocalizedString
    slug: LocalizedString
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
class ProductDraft:
    """Product draft.

    ``category_order_hints`` is keyed by the category reference's key while
    the categories are unresolved and by category id once they are resolved.
    """

    product_type: Reference
    name: LocalizedString
    slug: LocalizedString
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
class ChannelDraft:
    key: str | None = None
    roles: frozenset[ChannelRole] = frozenset()
    name: LocalizedString | None = None
    description: LocalizedString | None = None
    custom: CustomFields | None = None

    @property
    def external_key(self) -> str | None:
        return self.key


@dataclass(frozen=True, slots=True, kw_only=True)
class InventoryEntryDraft:
    sku: str | None = None
    quantity_on_stock: int = 0
    restockable_in_days: int | None = None
    expected_delivery: datetime | None = None
    supply_channel: Reference | None = None
    custom: CustomFields | None = None

    @property
    def external_key(self) -> str | None:
        return self.sku


type Draft = CategoryDraft | ProductDraft | ChannelDraft | InventoryEntryDraft

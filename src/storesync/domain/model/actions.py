"""Update actions: atomic, ordered field-level mutations of one record.

Each action class carries its wire name in ``action``. Field names map to the
wire format by camel-casing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import ChannelRole
    from .primitives import Asset, JsonValue, LocalizedString
    from .references import Reference


@dataclass(frozen=True, slots=True)
class UpdateAction:
    action: ClassVar[str]


# Shared content actions


@dataclass(frozen=True, slots=True)
class ChangeName(UpdateAction):
    action: ClassVar[str] = "changeName"
    name: LocalizedString | None


@dataclass(frozen=True, slots=True)
class ChangeSlug(UpdateAction):
    action: ClassVar[str] = "changeSlug"
    slug: LocalizedString


@dataclass(frozen=True, slots=True)
class SetDescription(UpdateAction):
    action: ClassVar[str] = "setDescription"
    description: LocalizedString | None


# Category


@dataclass(frozen=True, slots=True)
class ChangeParent(UpdateAction):
    action: ClassVar[str] = "changeParent"
    parent: Reference


@dataclass(frozen=True, slots=True)
class ChangeOrderHint(UpdateAction):
    action: ClassVar[str] = "changeOrderHint"
    order_hint: str | None


@dataclass(frozen=True, slots=True)
class SetMetaTitle(UpdateAction):
    action: ClassVar[str] = "setMetaTitle"
    meta_title: LocalizedString | None


@dataclass(frozen=True, slots=True)
class SetMetaDescription(UpdateAction):
    action: ClassVar[str] = "setMetaDescription"
    meta_description: LocalizedString | None


@dataclass(frozen=True, slots=True)
class SetMetaKeywords(UpdateAction):
    action: ClassVar[str] = "setMetaKeywords"
    meta_keywords: LocalizedString | None


@dataclass(frozen=True, slots=True)
class RemoveAsset(UpdateAction):
    action: ClassVar[str] = "removeAsset"
    asset_key: str


@dataclass(frozen=True, slots=True)
class ChangeAssetOrder(UpdateAction):
    action: ClassVar[str] = "changeAssetOrder"
    asset_order: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class AddAsset(UpdateAction):
    action: ClassVar[str] = "addAsset"
    asset: Asset
    position: int


@dataclass(frozen=True, slots=True)
class ChangeAssetName(UpdateAction):
    action: ClassVar[str] = "changeAssetName"
    asset_key: str
    name: LocalizedString


# Product


@dataclass(frozen=True, slots=True)
class SetTaxCategory(UpdateAction):
    action: ClassVar[str] = "setTaxCategory"
    tax_category: Reference | None


@dataclass(frozen=True, slots=True)
class TransitionState(UpdateAction):
    action: ClassVar[str] = "transitionState"
    state: Reference


@dataclass(frozen=True, slots=True)
class RemoveFromCategory(UpdateAction):
    action: ClassVar[str] = "removeFromCategory"
    category: Reference


@dataclass(frozen=True, slots=True)
class AddToCategory(UpdateAction):
    action: ClassVar[str] = "addToCategory"
    category: Reference


@dataclass(frozen=True, slots=True)
class SetCategoryOrderHint(UpdateAction):
    action: ClassVar[str] = "setCategoryOrderHint"
    category_id: str
    order_hint: str | None


@dataclass(frozen=True, slots=True)
class SetAttribute(UpdateAction):
    action: ClassVar[str] = "setAttribute"
    name: str
    value: JsonValue | None = None


# Channel


@dataclass(frozen=True, slots=True)
class AddRoles(UpdateAction):
    action: ClassVar[str] = "addRoles"
    roles: tuple[ChannelRole, ...]


@dataclass(frozen=True, slots=True)
class RemoveRoles(UpdateAction):
    action: ClassVar[str] = "removeRoles"
    roles: tuple[ChannelRole, ...]


# Inventory entry


@dataclass(frozen=True, slots=True)
class SetSupplyChannel(UpdateAction):
    action: ClassVar[str] = "setSupplyChannel"
    supply_channel: Reference | None


@dataclass(frozen=True, slots=True)
class ChangeQuantity(UpdateAction):
    action: ClassVar[str] = "changeQuantity"
    quantity: int


@dataclass(frozen=True, slots=True)
class SetRestockableInDays(UpdateAction):
    action: ClassVar[str] = "setRestockableInDays"
    restockable_in_days: int | None


@dataclass(frozen=True, slots=True)
class SetExpectedDelivery(UpdateAction):
    action: ClassVar[str] = "setExpectedDelivery"
    expected_delivery: datetime | None


# Custom fields


@dataclass(frozen=True, slots=True)
class SetCustomType(UpdateAction):
    """Attach ``type`` with ``fields``; ``type=None`` detaches custom metadata."""

    action: ClassVar[str] = "setCustomType"
    type: Reference | None = None
    fields: dict[str, JsonValue] | None = None


@dataclass(frozen=True, slots=True)
class SetCustomField(UpdateAction):
    """Set one custom field; ``value=None`` removes it."""

    action: ClassVar[str] = "setCustomField"
    name: str
    value: JsonValue | None = None

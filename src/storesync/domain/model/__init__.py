"""Public domain model surface."""

from __future__ import annotations

from storesync.domain.model.actions import (
    AddAsset,
    AddRoles,
    AddToCategory,
    ChangeAssetName,
    ChangeAssetOrder,
    ChangeName,
    ChangeOrderHint,
    ChangeParent,
    ChangeQuantity,
    ChangeSlug,
    RemoveAsset,
    RemoveFromCategory,
    RemoveRoles,
    SetAttribute,
    SetCategoryOrderHint,
    SetCustomField,
    SetCustomType,
    SetDescription,
    SetExpectedDelivery,
    SetMetaDescription,
    SetMetaKeywords,
    SetMetaTitle,
    SetRestockableInDays,
    SetSupplyChannel,
    SetTaxCategory,
    TransitionState,
    UpdateAction,
)
from storesync.domain.model.drafts import (
    CategoryDraft,
    ChannelDraft,
    Draft,
    InventoryEntryDraft,
    ProductDraft,
    SyncDraft,
)
from storesync.domain.model.enums import ChannelRole, ResourceKind
from storesync.domain.model.primitives import Asset, CustomFields, JsonValue, LocalizedString
from storesync.domain.model.records import Category, Channel, InventoryEntry, Product, Record
from storesync.domain.model.references import Reference

__all__ = [
    "AddAsset",
    "AddRoles",
    "AddToCategory",
    "Asset",
    "Category",
    "CategoryDraft",
    "ChangeAssetName",
    "ChangeAssetOrder",
    "ChangeName",
    "ChangeOrderHint",
    "ChangeParent",
    "ChangeQuantity",
    "ChangeSlug",
    "Channel",
    "ChannelDraft",
    "ChannelRole",
    "CustomFields",
    "Draft",
    "InventoryEntry",
    "InventoryEntryDraft",
    "JsonValue",
    "LocalizedString",
    "Product",
    "ProductDraft",
    "Record",
    "Reference",
    "RemoveAsset",
    "RemoveFromCategory",
    "RemoveRoles",
    "ResourceKind",
    "SetAttribute",
    "SetCategoryOrderHint",
    "SetCustomField",
    "SetCustomType",
    "SetDescription",
    "SetExpectedDelivery",
    "SetMetaDescription",
    "SetMetaKeywords",
    "SetMetaTitle",
    "SetRestockableInDays",
    "SetSupplyChannel",
    "SetTaxCategory",
    "SyncDraft",
    "TransitionState",
    "UpdateAction",
]

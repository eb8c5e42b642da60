"""Compute the ordered update actions that turn a record into its draft.

Builders are pure: they never touch the store or the reference cache and
expect every reference of the draft that could be resolved to be resolved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from storesync.domain.model import (
    Category,
    CategoryDraft,
    Channel,
    ChannelDraft,
    InventoryEntry,
    InventoryEntryDraft,
    Product,
    ProductDraft,
)

from ..errors import UnsupportedResourceTypeError
from .category import build_asset_actions, build_category_actions
from .channel import build_channel_actions
from .custom import (
    CategoryCustomActionBuilder,
    ChannelCustomActionBuilder,
    CustomFieldActionBuilder,
    InventoryEntryCustomActionBuilder,
    build_custom_field_actions,
    custom_action_builder_for_type,
)
from .inventory import build_inventory_entry_actions
from .product import build_product_actions

if TYPE_CHECKING:
    from storesync.config.sync import SyncOptions
    from storesync.domain.model import Draft, Record, UpdateAction


def build_actions(existing: Record, desired: Draft, options: SyncOptions) -> list[UpdateAction]:
    match existing, desired:
        case Category(), CategoryDraft():
            return build_category_actions(existing, desired, options)
        case Product(), ProductDraft():
            return build_product_actions(existing, desired, options)
        case Channel(), ChannelDraft():
            return build_channel_actions(existing, desired, options)
        case InventoryEntry(), InventoryEntryDraft():
            return build_inventory_entry_actions(existing, desired, options)
        case _:
            raise UnsupportedResourceTypeError(
                f"{type(existing).__name__}/{type(desired).__name__}"
            )


__all__ = [
    "CategoryCustomActionBuilder",
    "ChannelCustomActionBuilder",
    "CustomFieldActionBuilder",
    "InventoryEntryCustomActionBuilder",
    "build_actions",
    "build_asset_actions",
    "build_category_actions",
    "build_channel_actions",
    "build_custom_field_actions",
    "build_inventory_entry_actions",
    "build_product_actions",
    "custom_action_builder_for_type",
]

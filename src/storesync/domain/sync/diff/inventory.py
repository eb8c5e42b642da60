"""Inventory entry update actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from storesync.domain.model import (
    ChangeQuantity,
    SetExpectedDelivery,
    SetRestockableInDays,
    SetSupplyChannel,
)

from .common import build_optional_action, build_reference_action, build_required_action, compact
from .custom import build_custom_field_actions

if TYPE_CHECKING:
    from storesync.config.sync import SyncOptions
    from storesync.domain.model import InventoryEntry, InventoryEntryDraft, UpdateAction


def build_inventory_entry_actions(
    existing: InventoryEntry,
    desired: InventoryEntryDraft,
    options: SyncOptions,
) -> list[UpdateAction]:
    # entries are matched by sku alone; a moved entry gets SetSupplyChannel first
    actions = compact(
        build_reference_action(
            existing.supply_channel, desired.supply_channel, options, SetSupplyChannel
        ),
        build_required_action(
            existing.quantity_on_stock, desired.quantity_on_stock, ChangeQuantity
        ),
        build_optional_action(
            existing.restockable_in_days, desired.restockable_in_days, options, SetRestockableInDays
        ),
        build_optional_action(
            existing.expected_delivery, desired.expected_delivery, options, SetExpectedDelivery
        ),
    )
    actions.extend(build_custom_field_actions(existing, desired.custom))
    return actions

"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    """Type discriminator shared by references, stores and syncs."""

    CATEGORY = "category"
    PRODUCT = "product"
    PRODUCT_TYPE = "product-type"
    CHANNEL = "channel"
    INVENTORY_ENTRY = "inventory-entry"
    TYPE = "type"
    TAX_CATEGORY = "tax-category"
    STATE = "state"

    @property
    def label(self) -> str:
        """Human readable name used in sync messages."""
        return self.value.replace("-", " ")


class ChannelRole(StrEnum):
    INVENTORY_SUPPLY = "InventorySupply"
    PRODUCT_DISTRIBUTION = "ProductDistribution"
    ORDER_EXPORT = "OrderExport"
    ORDER_IMPORT = "OrderImport"
    PRIMARY = "Primary"

"""Custom type and custom field actions.

One builder variant exists per resource kind that carries custom fields. The
variant is chosen by a closed ``match`` over the record type; any other type
is a configuration error.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from storesync.domain.model import ResourceKind, SetCustomField, SetCustomType, records

from ..errors import UnsupportedResourceTypeError

if TYPE_CHECKING:
    from storesync.domain.model import CustomFields, JsonValue, Record, Reference, UpdateAction

log = getLogger(__name__)

type CustomisableRecord = records.Category | records.Channel | records.InventoryEntry


class CustomFieldActionBuilder:
    kind: ClassVar[ResourceKind]
    record_type: ClassVar[type[CustomisableRecord]]

    def remove_custom_type(self) -> UpdateAction:
        return SetCustomType()

    def set_custom_type(self, type_: Reference, fields: dict[str, JsonValue]) -> UpdateAction:
        return SetCustomType(type_, dict(fields))

    def set_custom_field(self, name: str, value: JsonValue | None) -> UpdateAction:
        return SetCustomField(name, value)

    def build_actions(
        self,
        existing: CustomFields | None,
        desired: CustomFields | None,
    ) -> list[UpdateAction]:
        """Diff the custom metadata of one record.

        * no desired custom while the record has one: detach the type
        * new or different type: set the type with the full desired fields
        * same type: one field action per added, changed or removed field
        """

        if desired is None:
            return [] if existing is None else [self.remove_custom_type()]
        if existing is None or existing.type.id != desired.type.id:
            return [self.set_custom_type(desired.type, desired.fields)]

        actions = [
            self.set_custom_field(name, value)
            for name, value in desired.fields.items()
            if name not in existing.fields or existing.fields[name] != value
        ]
        actions.extend(
            self.set_custom_field(name, None)
            for name in existing.fields
            if name not in desired.fields
        )
        if actions:
            log.debug("%d custom field actions on %s", len(actions), self.kind)
        return actions

    def actions_for(self, record: Record, desired: CustomFields | None) -> list[UpdateAction]:
        """``build_actions`` for a record of this builder's own type."""
        if not isinstance(record, self.record_type):
            raise UnsupportedResourceTypeError(type(record).__name__, self.kind)
        return self.build_actions(record.custom, desired)


class CategoryCustomActionBuilder(CustomFieldActionBuilder):
    """Custom fields of categories."""

    kind = ResourceKind.CATEGORY
    record_type = records.Category


class ChannelCustomActionBuilder(CustomFieldActionBuilder):
    """Custom fields of supply and distribution channels."""

    kind = ResourceKind.CHANNEL
    record_type = records.Channel


class InventoryEntryCustomActionBuilder(CustomFieldActionBuilder):
    """Custom fields of inventory entries, diffed after the stock actions."""

    kind = ResourceKind.INVENTORY_ENTRY
    record_type = records.InventoryEntry


def custom_action_builder_for_type(record_type: type[Record]) -> CustomFieldActionBuilder:
    match record_type:
        case records.Category:
            return CategoryCustomActionBuilder()
        case records.Channel:
            return ChannelCustomActionBuilder()
        case records.InventoryEntry:
            return InventoryEntryCustomActionBuilder()
        case _:
            raise UnsupportedResourceTypeError(record_type.__name__)


def build_custom_field_actions(
    existing: CustomisableRecord,
    desired: CustomFields | None,
) -> list[UpdateAction]:
    builder = custom_action_builder_for_type(type(existing))
    return builder.actions_for(existing, desired)

"""Translate between store payloads and domain objects."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, cast

from pydantic.alias_generators import to_camel

from storesync.domain.model import (
    Category,
    CategoryDraft,
    Channel,
    ChannelDraft,
    InventoryEntry,
    InventoryEntryDraft,
    Product,
    ProductDraft,
    Reference,
    ResourceKind,
)

from .schema import (
    CategoryDraftPayload,
    CategoryPayload,
    ChannelDraftPayload,
    ChannelPayload,
    InventoryEntryDraftPayload,
    InventoryEntryPayload,
    ProductDraftPayload,
    ProductPayload,
    StoreBaseModel,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from storesync.domain.model import Draft, Record, UpdateAction

RESOURCE_PATHS: dict[ResourceKind, str] = {
    ResourceKind.CATEGORY: "categories",
    ResourceKind.PRODUCT: "products",
    ResourceKind.PRODUCT_TYPE: "product-types",
    ResourceKind.CHANNEL: "channels",
    ResourceKind.INVENTORY_ENTRY: "inventory",
    ResourceKind.TYPE: "types",
    ResourceKind.TAX_CATEGORY: "tax-categories",
    ResourceKind.STATE: "states",
}

_KEY_FIELDS: dict[ResourceKind, str] = {ResourceKind.INVENTORY_ENTRY: "sku"}


def resource_path(kind: ResourceKind) -> str:
    return RESOURCE_PATHS[kind]


def key_field(kind: ResourceKind) -> str:
    """Name of the payload attribute holding the external key of ``kind``."""
    return _KEY_FIELDS.get(kind, "key")


def parse_record(kind: ResourceKind, payload: Mapping[str, object]) -> Record:
    match kind:
        case ResourceKind.CATEGORY:
            return CategoryPayload.model_validate(payload).to_record()
        case ResourceKind.PRODUCT:
            return ProductPayload.model_validate(payload).to_record()
        case ResourceKind.CHANNEL:
            return ChannelPayload.model_validate(payload).to_record()
        case ResourceKind.INVENTORY_ENTRY:
            return InventoryEntryPayload.model_validate(payload).to_record()
        case _:
            raise ValueError(f"{kind.label} records are not synchronised")


def parse_draft(kind: ResourceKind, payload: Mapping[str, object]) -> Draft:
    match kind:
        case ResourceKind.CATEGORY:
            return CategoryDraftPayload.model_validate(payload).to_draft()
        case ResourceKind.PRODUCT:
            return ProductDraftPayload.model_validate(payload).to_draft()
        case ResourceKind.CHANNEL:
            return ChannelDraftPayload.model_validate(payload).to_draft()
        case ResourceKind.INVENTORY_ENTRY:
            return InventoryEntryDraftPayload.model_validate(payload).to_draft()
        case _:
            raise ValueError(f"{kind.label} drafts are not synchronised")


def serialize_draft(draft: Draft) -> dict[str, object]:
    payload: StoreBaseModel
    match draft:
        case CategoryDraft():
            payload = CategoryDraftPayload.from_draft(draft)
        case ProductDraft():
            payload = ProductDraftPayload.from_draft(draft)
        case ChannelDraft():
            payload = ChannelDraftPayload.from_draft(draft)
        case InventoryEntryDraft():
            payload = InventoryEntryDraftPayload.from_draft(draft)
    return payload.model_dump(mode="json", by_alias=True, exclude_none=True)


def serialize_action(action: UpdateAction) -> dict[str, object]:
    """Render an update action as ``{"action": name, <camelCase fields>}``.

    Fields holding ``None`` are omitted, which the store reads as "unset".
    """

    body: dict[str, object] = {"action": action.action}
    for field in fields(action):
        value = getattr(action, field.name)
        if value is not None:
            body[to_camel(field.name)] = _to_json(value)
    return body


def _to_json(value: object) -> object:  # noqa: PLR0911
    match value:
        case Reference():
            return _drop_none({"typeId": value.type_id.value, "id": value.id, "key": value.key})
        case Enum():
            return value.value
        case datetime():
            return value.isoformat()
        case dict():
            mapping = cast("dict[str, object]", value)
            return {key: _to_json(item) for key, item in mapping.items()}
        case tuple() | list() | frozenset():
            items = cast("list[object]", list(value))
            return [_to_json(item) for item in items]
        case _ if is_dataclass(value) and not isinstance(value, type):
            return _drop_none(
                {to_camel(f.name): _to_json(getattr(value, f.name)) for f in fields(value)}
            )
        case _:
            return value


def _drop_none(mapping: dict[str, object]) -> dict[str, object]:
    return {key: item for key, item in mapping.items() if item is not None}


def record_kind(record: Record) -> ResourceKind:
    match record:
        case Category():
            return ResourceKind.CATEGORY
        case Product():
            return ResourceKind.PRODUCT
        case Channel():
            return ResourceKind.CHANNEL
        case InventoryEntry():
            return ResourceKind.INVENTORY_ENTRY


def serialize_record(record: Record) -> dict[str, object]:
    """Render a record in the same camelCase shape the store returns."""

    body = _to_json(record)
    return cast("dict[str, object]", body)

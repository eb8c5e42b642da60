"""Replay update actions onto a record.

Used by local stores to execute updates, which keeps them in step with what
the diff builders emit. The record version is left to the store.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from storesync.domain.model import (
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
    CustomFields,
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
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from storesync.domain.model import Record, UpdateAction


class ActionApplicationError(ValueError):
    """Raised when an action does not fit the record it is applied to."""


def apply_actions[R: Record](record: R, actions: Iterable[UpdateAction]) -> R:
    for action in actions:
        record = apply_action(record, action)
    return record


def apply_action[R: Record](record: R, action: UpdateAction) -> R:  # noqa: C901, PLR0911, PLR0912
    # Any: each branch touches fields of one record kind only
    target: Any = record
    try:
        match action:
            case ChangeName(name=name):
                return replace(target, name=name)
            case ChangeSlug(slug=slug):
                return replace(target, slug=slug)
            case SetDescription(description=description):
                return replace(target, description=description)
            case ChangeParent(parent=parent):
                return replace(target, parent=parent)
            case ChangeOrderHint(order_hint=order_hint):
                return replace(target, order_hint=order_hint)
            case SetMetaTitle(meta_title=value):
                return replace(target, meta_title=value)
            case SetMetaDescription(meta_description=value):
                return replace(target, meta_description=value)
            case SetMetaKeywords(meta_keywords=value):
                return replace(target, meta_keywords=value)
            case RemoveAsset(asset_key=key):
                return replace(target, assets=tuple(a for a in target.assets if a.key != key))
            case ChangeAssetOrder(asset_order=order):
                by_key = {asset.key: asset for asset in target.assets}
                if set(order) != set(by_key):
                    raise ActionApplicationError(
                        f"asset order {list(order)} does not match assets {list(by_key)}"
                    )
                return replace(target, assets=tuple(by_key[key] for key in order))
            case AddAsset(asset=asset, position=position):
                assets = list(target.assets)
                assets.insert(position, asset)
                return replace(target, assets=tuple(assets))
            case ChangeAssetName(asset_key=key, name=name):
                return replace(
                    target,
                    assets=tuple(
                        replace(asset, name=name) if asset.key == key else asset
                        for asset in target.assets
                    ),
                )
            case SetTaxCategory(tax_category=tax_category):
                return replace(target, tax_category=tax_category)
            case TransitionState(state=state):
                return replace(target, state=state)
            case RemoveFromCategory(category=category):
                hints = {k: v for k, v in target.category_order_hints.items() if k != category.id}
                categories = tuple(c for c in target.categories if c.id != category.id)
                return replace(target, categories=categories, category_order_hints=hints)
            case AddToCategory(category=category):
                return replace(target, categories=(*target.categories, category))
            case SetCategoryOrderHint(category_id=category_id, order_hint=hint):
                hints = dict(target.category_order_hints)
                if hint is None:
                    hints.pop(category_id, None)
                else:
                    hints[category_id] = hint
                return replace(target, category_order_hints=hints)
            case SetAttribute(name=name, value=value):
                attributes = dict(target.attributes)
                if value is None:
                    attributes.pop(name, None)
                else:
                    attributes[name] = value
                return replace(target, attributes=attributes)
            case AddRoles(roles=roles):
                return replace(target, roles=target.roles | frozenset(roles))
            case RemoveRoles(roles=roles):
                return replace(target, roles=target.roles - frozenset(roles))
            case SetSupplyChannel(supply_channel=channel):
                return replace(target, supply_channel=channel)
            case ChangeQuantity(quantity=quantity):
                return replace(target, quantity_on_stock=quantity)
            case SetRestockableInDays(restockable_in_days=days):
                return replace(target, restockable_in_days=days)
            case SetExpectedDelivery(expected_delivery=expected):
                return replace(target, expected_delivery=expected)
            case SetCustomType(type=None):
                return replace(target, custom=None)
            case SetCustomType(type=type_, fields=fields) if type_ is not None:
                return replace(target, custom=CustomFields(type=type_, fields=dict(fields or {})))
            case SetCustomField(name=name, value=value):
                return replace(target, custom=_set_custom_field(target.custom, name, value))
            case _:
                raise ActionApplicationError(f"unknown action {action.action!r}")
    except (AttributeError, TypeError) as exc:
        raise ActionApplicationError(
            f"{action.action} cannot be applied to {type(record).__name__}"
        ) from exc


def _set_custom_field(custom: CustomFields | None, name: str, value: object) -> CustomFields:
    if custom is None:
        raise ActionApplicationError(f"cannot set custom field {name!r} without a custom type")
    fields = dict(custom.fields)
    if value is None:
        fields.pop(name, None)
    else:
        fields[name] = value
    return replace(custom, fields=fields)

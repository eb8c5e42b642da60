"""Product update actions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from storesync.domain.model import (
    AddToCategory,
    ChangeName,
    ChangeSlug,
    RemoveFromCategory,
    SetAttribute,
    SetCategoryOrderHint,
    SetDescription,
    SetTaxCategory,
    TransitionState,
)

from .common import build_localized_action, build_reference_action, compact, diff_entries

if TYPE_CHECKING:
    from storesync.config.sync import SyncOptions
    from storesync.domain.model import Product, ProductDraft, Reference, UpdateAction

log = getLogger(__name__)


def build_product_actions(
    existing: Product,
    desired: ProductDraft,
    options: SyncOptions,
) -> list[UpdateAction]:
    if desired.product_type.is_resolved and desired.product_type.id != existing.product_type.id:
        log.warning(
            "Product type of product with key:'%s' differs (%s != %s); "
            "it cannot be changed by an update and is ignored.",
            existing.key,
            existing.product_type.id,
            desired.product_type.id,
        )

    actions = compact(
        build_localized_action(existing.name, desired.name, options, ChangeName, required=True),
        build_localized_action(existing.slug, desired.slug, options, ChangeSlug, required=True),
        build_localized_action(existing.description, desired.description, options, SetDescription),
        build_reference_action(
            existing.tax_category, desired.tax_category, options, SetTaxCategory
        ),
        build_reference_action(
            existing.state, desired.state, options, TransitionState, removable=False
        ),
    )
    actions.extend(build_category_actions(existing, desired, options))
    actions.extend(build_attribute_actions(existing, desired, options))
    return actions


def build_category_actions(
    existing: Product,
    desired: ProductDraft,
    options: SyncOptions,
) -> list[UpdateAction]:
    """Category membership and order hints, keyed by category id.

    Categories of the draft that are still unresolved are ignored.
    """

    by_id: dict[str, Reference] = {}
    for category in desired.categories:
        if category.id is not None:
            by_id.setdefault(category.id, category)
    current = {category.id: category for category in existing.categories if category.id}

    added, removed = diff_entries(current, by_id, options)
    actions: list[UpdateAction] = [RemoveFromCategory(current[id_]) for id_ in removed]
    actions.extend(AddToCategory(by_id[id_]) for id_ in added)

    for id_ in by_id:
        hint = desired.category_order_hints.get(id_)
        if hint == existing.category_order_hints.get(id_):
            continue
        if hint is None and (id_ in added or not options.remove_other_properties):
            continue
        actions.append(SetCategoryOrderHint(id_, hint))
    return actions


def build_attribute_actions(
    existing: Product,
    desired: ProductDraft,
    options: SyncOptions,
) -> list[UpdateAction]:
    actions: list[UpdateAction] = [
        SetAttribute(name, value)
        for name, value in desired.attributes.items()
        if name not in existing.attributes or existing.attributes[name] != value
    ]
    if options.remove_other_properties:
        actions.extend(
            SetAttribute(name) for name in existing.attributes if name not in desired.attributes
        )
    return actions

"""Category update actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from storesync.domain.model import (
    AddAsset,
    ChangeAssetName,
    ChangeAssetOrder,
    ChangeName,
    ChangeOrderHint,
    ChangeParent,
    ChangeSlug,
    RemoveAsset,
    SetDescription,
    SetMetaDescription,
    SetMetaKeywords,
    SetMetaTitle,
)

from .common import (
    build_localized_action,
    build_optional_action,
    build_reference_action,
    compact,
    localized_target,
)
from .custom import build_custom_field_actions

if TYPE_CHECKING:
    from storesync.config.sync import SyncOptions
    from storesync.domain.model import Asset, Category, CategoryDraft, UpdateAction


def build_category_actions(
    existing: Category,
    desired: CategoryDraft,
    options: SyncOptions,
) -> list[UpdateAction]:
    actions = compact(
        build_localized_action(existing.name, desired.name, options, ChangeName, required=True),
        build_localized_action(existing.slug, desired.slug, options, ChangeSlug, required=True),
        build_localized_action(existing.description, desired.description, options, SetDescription),
        # a category cannot be moved back to the root
        build_reference_action(
            existing.parent, desired.parent, options, ChangeParent, removable=False
        ),
        build_optional_action(existing.order_hint, desired.order_hint, options, ChangeOrderHint),
        build_localized_action(existing.meta_title, desired.meta_title, options, SetMetaTitle),
        build_localized_action(
            existing.meta_description, desired.meta_description, options, SetMetaDescription
        ),
        build_localized_action(
            existing.meta_keywords, desired.meta_keywords, options, SetMetaKeywords
        ),
    )
    actions.extend(build_asset_actions(existing.assets, desired.assets, options))
    actions.extend(build_custom_field_actions(existing, desired.custom))
    return actions


def build_asset_actions(
    existing: tuple[Asset, ...],
    desired: tuple[Asset, ...],
    options: SyncOptions,
) -> list[UpdateAction]:
    """Diff assets matched by key.

    Emits removals, then one reorder of the surviving assets, then additions
    at their target position, then name changes. Assets of the record that
    are not in the draft are kept at the end when collection entries are not
    removed.
    """

    existing_by_key = {asset.key: asset for asset in existing}
    wanted = {asset.key for asset in desired}

    actions: list[UpdateAction] = []
    if options.remove_other_collection_entries:
        actions.extend(RemoveAsset(asset.key) for asset in existing if asset.key not in wanted)
        remaining = [asset.key for asset in existing if asset.key in wanted]
    else:
        remaining = [asset.key for asset in existing]

    common = [asset.key for asset in desired if asset.key in existing_by_key]
    extras = [key for key in remaining if key not in wanted]
    if [key for key in remaining if key in wanted] != common:
        actions.append(ChangeAssetOrder((*common, *extras)))

    actions.extend(
        AddAsset(asset, position)
        for position, asset in enumerate(desired)
        if asset.key not in existing_by_key
    )

    for asset in desired:
        current = existing_by_key.get(asset.key)
        if current is None:
            continue
        name = localized_target(current.name, asset.name, options)
        if name != current.name:
            actions.append(ChangeAssetName(asset.key, name))
    return actions

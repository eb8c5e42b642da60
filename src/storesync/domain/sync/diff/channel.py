"""Channel update actions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from storesync.domain.model import AddRoles, ChangeName, RemoveRoles, SetDescription

from .common import build_localized_action, compact, diff_entries
from .custom import build_custom_field_actions

if TYPE_CHECKING:
    from storesync.config.sync import SyncOptions
    from storesync.domain.model import Channel, ChannelDraft, UpdateAction


def build_channel_actions(
    existing: Channel,
    desired: ChannelDraft,
    options: SyncOptions,
) -> list[UpdateAction]:
    actions = compact(
        build_localized_action(existing.name, desired.name, options, ChangeName),
        build_localized_action(existing.description, desired.description, options, SetDescription),
    )
    added, removed = diff_entries(sorted(existing.roles), sorted(desired.roles), options)
    if added:
        actions.append(AddRoles(tuple(added)))
    if removed:
        actions.append(RemoveRoles(tuple(removed)))
    actions.extend(build_custom_field_actions(existing, desired.custom))
    return actions

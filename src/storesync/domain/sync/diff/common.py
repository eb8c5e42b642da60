"""Field-level comparison helpers shared by the per-kind diff builders.

Every helper returns ``None`` when the field needs no action, so builders can
list one call per field and drop the ``None`` entries with ``compact``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable

    from storesync.config.sync import SyncOptions
    from storesync.domain.model import LocalizedString, Reference, UpdateAction


def compact(*actions: UpdateAction | None) -> list[UpdateAction]:
    return [action for action in actions if action is not None]


def localized_target(
    existing: LocalizedString | None,
    desired: LocalizedString,
    options: SyncOptions,
) -> LocalizedString:
    """Return the value a localized field should end up with.

    Without ``remove_other_locales`` the desired locales are overlaid on the
    existing value, so locales missing from the draft survive.
    """

    if options.remove_other_locales or not existing:
        return dict(desired)
    return {**existing, **desired}


def build_localized_action(
    existing: LocalizedString | None,
    desired: LocalizedString | None,
    options: SyncOptions,
    factory: Callable[[LocalizedString | None], UpdateAction],
    *,
    required: bool = False,
) -> UpdateAction | None:
    if desired is None:
        if required or not existing or not options.remove_other_properties:
            return None
        return factory(None)
    target = localized_target(existing, desired, options)
    if (target or None) == (existing or None):
        return None
    return factory(target)


def build_optional_action[T](
    existing: T | None,
    desired: T | None,
    options: SyncOptions,
    factory: Callable[[T | None], UpdateAction],
) -> UpdateAction | None:
    if desired == existing:
        return None
    if desired is None and not options.remove_other_properties:
        return None
    return factory(desired)


def build_required_action[T](
    existing: T,
    desired: T | None,
    factory: Callable[[T], UpdateAction],
) -> UpdateAction | None:
    if desired is None or desired == existing:
        return None
    return factory(desired)


def build_reference_action(
    existing: Reference | None,
    desired: Reference | None,
    options: SyncOptions,
    factory: Callable[[Reference | None], UpdateAction],
    *,
    removable: bool = True,
) -> UpdateAction | None:
    """Compare references by store id.

    A desired reference that is still unresolved leaves the field untouched.
    """

    if desired is None:
        if existing is None or not removable or not options.remove_other_properties:
            return None
        return factory(None)
    if not desired.is_resolved:
        return None
    if existing is not None and existing.id == desired.id:
        return None
    return factory(desired)


def diff_entries[T: Hashable](
    existing: Iterable[T],
    desired: Iterable[T],
    options: SyncOptions,
) -> tuple[list[T], list[T]]:
    """Return ``(added, removed)`` entries, each in its source order.

    ``removed`` stays empty unless ``remove_other_set_entries`` is set.
    """

    existing_entries = list(dict.fromkeys(existing))
    desired_entries = list(dict.fromkeys(desired))
    current = set(existing_entries)
    wanted = set(desired_entries)
    added = [entry for entry in desired_entries if entry not in current]
    removed = (
        [entry for entry in existing_entries if entry not in wanted]
        if options.remove_other_set_entries
        else []
    )
    return added, removed

"""Options shared by every resource sync."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger

from .env import env_bool, env_int
from .errors import ConfigurationError

log = getLogger(__name__)

DEFAULT_BATCH_SIZE = 30
DEFAULT_MAX_CONCURRENCY = 1

ErrorCallback = Callable[[str, BaseException | None], None]
WarningCallback = Callable[[str], None]


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncOptions:
    """Container of the knobs a sync run honours.

    The ``remove_other_*`` flags choose between full replacement (``True``)
    and additive-only merges (``False``) per field category.
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    remove_other_locales: bool = True
    remove_other_set_entries: bool = True
    remove_other_collection_entries: bool = True
    remove_other_properties: bool = True
    allow_uuid_keys: bool = False
    error_callback: ErrorCallback | None = None
    warning_callback: WarningCallback | None = None

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")
        if self.max_concurrency <= 0:
            raise ConfigurationError(
                f"max_concurrency must be positive, got {self.max_concurrency}"
            )

    def apply_error_callback(self, message: str, cause: BaseException | None = None) -> None:
        log.error(message)
        if self.error_callback is not None:
            self.error_callback(message, cause)

    def apply_warning_callback(self, message: str) -> None:
        log.warning(message)
        if self.warning_callback is not None:
            self.warning_callback(message)


def get_sync_options(
    *,
    error_callback: ErrorCallback | None = None,
    warning_callback: WarningCallback | None = None,
) -> SyncOptions:
    """Build sync options from ``STORESYNC_*`` environment variables."""

    return SyncOptions(
        batch_size=env_int("STORESYNC_BATCH_SIZE", DEFAULT_BATCH_SIZE),
        max_concurrency=env_int("STORESYNC_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY),
        remove_other_locales=env_bool("STORESYNC_REMOVE_OTHER_LOCALES", True),
        remove_other_set_entries=env_bool("STORESYNC_REMOVE_OTHER_SET_ENTRIES", True),
        remove_other_collection_entries=env_bool(
            "STORESYNC_REMOVE_OTHER_COLLECTION_ENTRIES", True
        ),
        remove_other_properties=env_bool("STORESYNC_REMOVE_OTHER_PROPERTIES", True),
        allow_uuid_keys=env_bool("STORESYNC_ALLOW_UUID_KEYS", False),
        error_callback=error_callback,
        warning_callback=warning_callback,
    )

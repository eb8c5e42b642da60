"""Reconciliation engine: resolve, diff and apply drafts against a store."""

from __future__ import annotations

from storesync.domain.sync.apply import ActionApplicationError, apply_action, apply_actions
from storesync.domain.sync.cache import ReferenceCache
from storesync.domain.sync.diff import build_actions
from storesync.domain.sync.engine import (
    ResourceSync,
    category_sync,
    channel_sync,
    inventory_entry_sync,
    product_sync,
    sync_for,
)
from storesync.domain.sync.errors import (
    CreateError,
    FetchError,
    InvalidReferenceKeyError,
    MissingExternalKeyError,
    ReferenceFailure,
    ReferenceResolutionError,
    SyncError,
    UnsupportedResourceTypeError,
    UpdateError,
)
from storesync.domain.sync.query import DEFAULT_PAGE_SIZE, fetch_all, query_all
from storesync.domain.sync.statistics import SyncStatistics

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "ActionApplicationError",
    "CreateError",
    "FetchError",
    "InvalidReferenceKeyError",
    "MissingExternalKeyError",
    "ReferenceCache",
    "ReferenceFailure",
    "ReferenceResolutionError",
    "ResourceSync",
    "SyncError",
    "SyncStatistics",
    "UnsupportedResourceTypeError",
    "UpdateError",
    "apply_action",
    "apply_actions",
    "build_actions",
    "category_sync",
    "channel_sync",
    "fetch_all",
    "inventory_entry_sync",
    "product_sync",
    "query_all",
    "sync_for",
]

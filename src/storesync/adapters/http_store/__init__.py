"""Public interface for the HTTP record-store adapter."""

from __future__ import annotations

from .client import HttpRecordStore, StoreAPIError, where_key_in
from .translator import (
    RESOURCE_PATHS,
    parse_draft,
    parse_record,
    record_kind,
    serialize_action,
    serialize_draft,
    serialize_record,
)

__all__ = [
    "RESOURCE_PATHS",
    "HttpRecordStore",
    "StoreAPIError",
    "parse_draft",
    "parse_record",
    "record_kind",
    "serialize_action",
    "serialize_draft",
    "serialize_record",
    "where_key_in",
]

"""SQLAlchemy adapter package for storesync."""

from __future__ import annotations

from .store import SqlAlchemyRecordStore, VersionConflictError
from .tables import create_all_tables, metadata, records_table

__all__ = [
    "SqlAlchemyRecordStore",
    "VersionConflictError",
    "create_all_tables",
    "metadata",
    "records_table",
]

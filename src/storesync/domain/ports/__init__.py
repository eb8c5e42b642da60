"""Domain port definitions for adapters."""

from __future__ import annotations

from .store import KeyPredicate, RecordStore, StoreError

__all__ = ["KeyPredicate", "RecordStore", "StoreError"]

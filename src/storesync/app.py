"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from pydantic import TypeAdapter

from storesync.adapters.http_store import HttpRecordStore, parse_draft
from storesync.adapters.sqlalchemy import SqlAlchemyRecordStore
from storesync.config import SyncOptions, get_database_config, get_store_config
from storesync.domain.sync import sync_for

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from storesync.domain.model import Draft, ResourceKind
    from storesync.domain.ports import RecordStore
    from storesync.domain.sync import SyncStatistics

type StoreName = Literal["http", "sqlite"]

log = getLogger(__name__)

_DRAFT_LIST = TypeAdapter(list[dict[str, object] | None])


def load_drafts(kind: ResourceKind, path: Path) -> list[Draft | None]:
    """Read a JSON array of drafts; ``null`` entries are kept as missing drafts."""

    items = _DRAFT_LIST.validate_json(path.read_bytes())
    return [None if item is None else parse_draft(kind, item) for item in items]


def sync_drafts(
    kind: ResourceKind,
    drafts: Sequence[Draft | None],
    *,
    options: SyncOptions | None = None,
    store: RecordStore | None = None,
    store_name: StoreName = "http",
) -> SyncStatistics:
    """Synchronise ``drafts`` against the given or the configured store."""

    effective_options = options or SyncOptions()
    log.info(
        "Starting %s sync: drafts=%d, store=%s, batch_size=%d, max_concurrency=%d",
        kind.label,
        len(drafts),
        "custom" if store is not None else store_name,
        effective_options.batch_size,
        effective_options.max_concurrency,
    )
    statistics = asyncio.run(_sync_async(kind, drafts, effective_options, store, store_name))
    log.info(
        "Finished %s sync: created=%d, updated=%d, up_to_date=%d, failed=%d",
        kind.label,
        statistics.created,
        statistics.updated,
        statistics.up_to_date,
        statistics.failed,
    )
    return statistics


async def _sync_async(
    kind: ResourceKind,
    drafts: Sequence[Draft | None],
    options: SyncOptions,
    store: RecordStore | None,
    store_name: StoreName,
) -> SyncStatistics:
    if store is not None:
        return await sync_for(kind, store, options).sync_async(drafts)
    if store_name == "sqlite":
        local_store = SqlAlchemyRecordStore.from_uri(get_database_config().uri)
        return await sync_for(kind, local_store, options).sync_async(drafts)
    async with HttpRecordStore(config=get_store_config()) as http_store:
        return await sync_for(kind, http_store, options).sync_async(drafts)

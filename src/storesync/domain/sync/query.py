"""Paginated retrieval of every record matching a predicate."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from storesync.domain.model import Record, ResourceKind
    from storesync.domain.ports import KeyPredicate, RecordStore

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 500


async def query_all[T](
    store: RecordStore,
    kind: ResourceKind,
    predicate: KeyPredicate,
    on_page: Callable[[list[Record]], T],
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[T]:
    """Walk all pages of ``kind`` matching ``predicate``.

    ``on_page`` runs once per fetched page, a trailing empty page included,
    and its results are returned in page order. Paging stops at the first page shorter than
    ``page_size``; a store failure propagates unchanged.
    """

    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")

    results: list[T] = []
    offset = 0
    while True:
        page = await store.query_page(kind, predicate, offset=offset, limit=page_size)
        log.debug("Fetched %s page at offset %d (%d records)", kind, offset, len(page))
        results.append(on_page(page))
        if len(page) < page_size:
            return results
        offset += page_size


async def fetch_all(
    store: RecordStore,
    kind: ResourceKind,
    predicate: KeyPredicate,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[Record]:
    """Collect every record matching ``predicate`` into one list."""

    pages = await query_all(store, kind, predicate, list, page_size=page_size)
    return [record for page in pages for record in page]

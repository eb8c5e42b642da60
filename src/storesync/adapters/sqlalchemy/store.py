"""Record store persisted in one SQL table through SQLAlchemy."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from storesync.adapters.http_store import (
    parse_record,
    record_kind,
    serialize_draft,
    serialize_record,
)
from storesync.domain.ports import StoreError
from storesync.domain.sync.apply import ActionApplicationError, apply_actions

from .tables import create_all_tables, records_table

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from sqlalchemy.engine import Engine, Row
    from sqlalchemy.orm import Session

    from storesync.domain.model import Draft, Record, ResourceKind, UpdateAction
    from storesync.domain.ports import KeyPredicate, RecordStore

log = getLogger(__name__)


class VersionConflictError(StoreError):
    """Raised when an update targets an outdated record version."""


class SqlAlchemyRecordStore:
    """``RecordStore`` keeping every kind in the ``records`` table.

    Records are stored as their JSON payload next to the indexed kind, key
    and version columns. Updates replay the actions with the action applier
    and bump the version.

    Each call runs its statement synchronously on the event loop and never
    yields, so concurrent drafts are served one statement at a time and
    ``SyncOptions.max_concurrency`` buys no parallelism against this store.
    """

    def __init__(self, engine: Engine, *, id_factory: Callable[[], str] | None = None) -> None:
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        create_all_tables(engine)

    @classmethod
    def from_uri(cls, database_uri: str) -> SqlAlchemyRecordStore:
        return cls(create_engine(database_uri, future=True))

    def add_key(self, kind: ResourceKind, key: str) -> str:
        """Register a bare keyed resource, e.g. a product type, and return its id."""

        id_ = self._id_factory()
        with self._transaction() as session:
            session.execute(
                records_table.insert().values(
                    id=id_, kind=kind.value, key=key, version=1, payload={"key": key}
                )
            )
        return id_

    async def lookup_id_by_key(self, kind: ResourceKind, key: str) -> str | None:
        stmt = select(records_table.c.id).where(
            records_table.c.kind == kind.value, records_table.c.key == key
        )
        with self._transaction() as session:
            return session.execute(stmt).scalar_one_or_none()

    async def get_by_key(self, kind: ResourceKind, key: str) -> Record | None:
        stmt = select(records_table).where(
            records_table.c.kind == kind.value, records_table.c.key == key
        )
        with self._transaction() as session:
            row = session.execute(stmt).one_or_none()
        return self._to_record(kind, row) if row is not None else None

    async def query_page(
        self,
        kind: ResourceKind,
        predicate: KeyPredicate,
        *,
        offset: int,
        limit: int,
    ) -> list[Record]:
        stmt = (
            select(records_table)
            .where(
                records_table.c.kind == kind.value,
                records_table.c.key.in_(predicate.sorted_keys()),
            )
            .order_by(records_table.c.key)
            .offset(offset)
            .limit(limit)
        )
        with self._transaction() as session:
            rows = session.execute(stmt).all()
        return [self._to_record(kind, row) for row in rows]

    async def create(self, kind: ResourceKind, draft: Draft) -> Record:
        id_ = self._id_factory()
        try:
            record = parse_record(kind, {**serialize_draft(draft), "id": id_, "version": 1})
        except (ValidationError, ValueError) as exc:
            raise StoreError(f"Invalid {kind.label} draft: {exc}") from exc
        with self._transaction() as session:
            session.execute(
                records_table.insert().values(
                    id=id_,
                    kind=kind.value,
                    key=record.external_key,
                    version=record.version,
                    payload=serialize_record(record),
                )
            )
        log.debug("Created %s '%s' as %s", kind.label, record.external_key, id_)
        return record

    async def update(self, record: Record, actions: Sequence[UpdateAction]) -> Record:
        kind = record_kind(record)
        try:
            updated = apply_actions(record, actions)
        except ActionApplicationError as exc:
            raise StoreError(f"Cannot update {kind.label} {record.id}: {exc}") from exc
        new_version = record.version + 1
        stmt = (
            records_table.update()
            .where(records_table.c.id == record.id, records_table.c.version == record.version)
            .values(
                version=new_version,
                key=updated.external_key,
                payload=serialize_record(updated),
            )
        )
        with self._transaction() as session:
            result = session.execute(stmt)
            if result.rowcount != 1:
                raise VersionConflictError(
                    f"{kind.label} {record.id} is not at version {record.version}"
                )
        return self._reload(kind, record.id)

    def _reload(self, kind: ResourceKind, id_: str) -> Record:
        with self._transaction() as session:
            row = session.execute(select(records_table).where(records_table.c.id == id_)).one()
        return self._to_record(kind, row)

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        try:
            with self._session_factory.begin() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StoreError(f"Database error: {exc}") from exc

    @staticmethod
    def _to_record(kind: ResourceKind, row: Row[tuple[object, ...]]) -> Record:
        payload = dict(row.payload)
        payload["id"] = row.id
        payload["version"] = row.version
        try:
            return parse_record(kind, payload)
        except ValidationError as exc:
            raise StoreError(f"Stored {kind.label} {row.id} is invalid: {exc}") from exc


if TYPE_CHECKING:
    _store_check: RecordStore = SqlAlchemyRecordStore.from_uri("sqlite://")

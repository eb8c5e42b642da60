"""Table metadata for the local record store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Column, Index, Integer, MetaData, String, Table, UniqueConstraint

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData()

records_table = Table(
    "records",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("kind", String(32), nullable=False),
    Column("key", String(256), nullable=True),
    Column("version", Integer, nullable=False, default=1),
    Column("payload", JSON, nullable=False),
    UniqueConstraint("kind", "key", name="uq_records_kind_key"),
    Index("ix_records_kind", "kind"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the record store."""

    log.info("Creating all tables")
    metadata.create_all(engine)

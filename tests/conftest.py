from __future__ import annotations

import os
from itertools import count
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from storesync.adapters.sqlalchemy import SqlAlchemyRecordStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_store(sqlite_engine: Engine) -> SqlAlchemyRecordStore:
    ids = count(1)
    return SqlAlchemyRecordStore(sqlite_engine, id_factory=lambda: f"row-{next(ids)}")

# File: /tests/test_bulk_insert.py | Version: 1.0 | Title: Chunked bulk insert (batch independence on failure)
from __future__ import annotations

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gridbase.core.exceptions import BulkInsertError, InvalidReference
from gridbase.crud import records as crud_records
from gridbase.crud import tables as crud_tables
from gridbase.db import Base
from gridbase.models import Record, User


@pytest.fixture()
def isolated_session():
    """A private in-memory database so commits and rollbacks are real."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def _table(db):
    user = User(email="bulk@example.com", hashed_password="x")
    db.add(user)
    db.commit()
    table = crud_tables.create_table(db, owner_id=user.id, name="Bulk")
    field = crud_tables.add_field(db, table_id=table.id, name="N", field_type="number")
    return table, field


def _count(db, table_id) -> int:
    return db.execute(select(func.count(Record.id)).where(Record.table_id == table_id)).scalar()


def test_rows_are_committed_in_batches(isolated_session):
    table, field = _table(isolated_session)
    inserted = crud_records.insert_rows(
        isolated_session,
        table_id=table.id,
        rows=[{field.id: i} for i in range(10)],
        batch_size=4,
    )
    assert inserted == 10
    assert _count(isolated_session, table.id) == 10


def test_failed_batch_keeps_earlier_batches(isolated_session, monkeypatch):
    table, field = _table(isolated_session)
    real_commit = isolated_session.commit
    calls = {"n": 0}

    def flaky_commit():
        calls["n"] += 1
        if calls["n"] == 2:
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))
        real_commit()

    monkeypatch.setattr(isolated_session, "commit", flaky_commit)
    with pytest.raises(BulkInsertError) as excinfo:
        crud_records.insert_rows(
            isolated_session,
            table_id=table.id,
            rows=[{field.id: i} for i in range(9)],
            batch_size=3,
        )
    monkeypatch.undo()

    assert excinfo.value.committed == 3
    assert excinfo.value.status_code == 500
    assert _count(isolated_session, table.id) == 3

    # the caller resumes from ``committed``
    crud_records.insert_rows(
        isolated_session,
        table_id=table.id,
        rows=[{field.id: i} for i in range(3, 9)],
        batch_size=3,
    )
    assert _count(isolated_session, table.id) == 9


def test_unknown_field_rejects_whole_request(isolated_session):
    table, field = _table(isolated_session)
    with pytest.raises(InvalidReference):
        crud_records.insert_rows(
            isolated_session,
            table_id=table.id,
            rows=[{field.id: 1}, {"not-a-field": 2}],
            batch_size=1,
        )
    assert _count(isolated_session, table.id) == 0

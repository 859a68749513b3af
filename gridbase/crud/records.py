# File: /gridbase/crud/records.py | Version: 1.0 | Title: Record CRUD (single insert + chunked bulk insert)
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any, List, Mapping, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gridbase.core.config import settings
from gridbase.core.exceptions import BulkInsertError
from gridbase.models.core_entities import Record, utcnow
from gridbase.models.custom_fields import CellValue
from gridbase.query.fields import FieldRegistry
from gridbase.query.values import coerce, storage_columns

logger = logging.getLogger(__name__)

_TICK = timedelta(microseconds=1)


def _aware(dt: datetime) -> datetime:
    # SQLite returns naive UTC
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def _next_timestamps(db: Session, table_id: str, count: int) -> List[datetime]:
    """
    ``count`` creation times, each later than every existing record of the
    table, so insertion order and created_at order agree.
    """
    last = db.execute(
        select(Record.created_at)
        .where(Record.table_id == table_id)
        .order_by(Record.created_at.desc())
        .limit(1)
    ).scalar()
    start = utcnow()
    if last is not None and _aware(last) >= start:
        start = _aware(last) + _TICK
    return [start + _TICK * i for i in range(count)]


def _validate_cells(registry: FieldRegistry, cells: Mapping[str, Any]) -> None:
    for field_id in cells:
        registry.require(field_id)


def _build(table_id: str, created_at: datetime, cells: Mapping[str, Any]) -> Record:
    record = Record(table_id=table_id, created_at=created_at)
    record.cells = [
        CellValue(field_id=str(fid), **storage_columns(coerce(raw))) for fid, raw in cells.items()
    ]
    return record


def create_record(
    db: Session, *, table_id: str, cells: Optional[Mapping[str, Any]] = None
) -> Record:
    table_id = str(table_id)
    cells = cells or {}
    _validate_cells(FieldRegistry.load(db, table_id), cells)

    (stamp,) = _next_timestamps(db, table_id, 1)
    record = _build(table_id, stamp, cells)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def insert_rows(
    db: Session,
    *,
    table_id: str,
    rows: Sequence[Mapping[str, Any]],
    batch_size: Optional[int] = None,
) -> int:
    """
    Insert ``rows`` (each a ``{field_id: raw value}`` mapping) in batches.

    Each batch is its own transaction. A failing batch is rolled back and
    reported through BulkInsertError with the number of rows committed before
    it; those earlier batches stay committed, so the caller can resume from
    ``committed``.
    """
    table_id = str(table_id)
    size = max(1, batch_size or settings.BULK_INSERT_BATCH_SIZE)
    registry = FieldRegistry.load(db, table_id)
    for cells in rows:
        _validate_cells(registry, cells)

    committed = 0
    for start in range(0, len(rows), size):
        chunk = rows[start:start + size]
        try:
            stamps = _next_timestamps(db, table_id, len(chunk))
            db.add_all([_build(table_id, stamp, cells) for stamp, cells in zip(stamps, chunk)])
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "Bulk insert into table %s failed at row %d (%d committed): %s",
                table_id, start, committed, exc,
            )
            raise BulkInsertError(
                f"Batch starting at row {start} failed; {committed} rows were committed",
                committed=committed,
            ) from exc
        committed += len(chunk)
        logger.info("Inserted %d/%d rows into table %s", committed, len(rows), table_id)
    return committed


def get_record(db: Session, record_id: str) -> Optional[Record]:
    return db.get(Record, str(record_id))


def delete_record(db: Session, record: Record) -> None:
    db.delete(record)
    db.commit()

# File: /gridbase/crud/cells.py | Version: 1.0 | Title: Cell Value upsert (one row per record/field)
from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gridbase.core.exceptions import InvalidReference, NotFound
from gridbase.models.core_entities import Record
from gridbase.models.custom_fields import CellValue, Field
from gridbase.query.values import coerce, from_storage, storage_columns, to_json


def _find(db: Session, record_id: str, field_id: str) -> Optional[CellValue]:
    return db.execute(
        select(CellValue).where(
            CellValue.record_id == record_id,
            CellValue.field_id == field_id,
        )
    ).scalar_one_or_none()


def _assign(row: CellValue, columns: Dict[str, Any]) -> None:
    for key, val in columns.items():
        setattr(row, key, val)


def upsert_cell(db: Session, *, record_id: str, field_id: str, value: Any) -> CellValue:
    """
    Write one cell. Raw values that are neither text nor a finite number are
    stored as Null. Concurrent writers to the same cell: last commit wins.
    """
    record_id, field_id = str(record_id), str(field_id)
    record = db.get(Record, record_id)
    if record is None:
        raise NotFound("Record not found")
    field = db.get(Field, field_id)
    if field is None:
        raise NotFound("Field not found")
    if field.table_id != record.table_id:
        raise InvalidReference(f"Field {field_id} does not belong to the record's table")

    columns = storage_columns(coerce(value))
    row = _find(db, record_id, field_id)
    if row is not None:
        _assign(row, columns)
        db.commit()
        db.refresh(row)
        return row

    row = CellValue(record_id=record_id, field_id=field_id, **columns)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # another writer inserted the pair first; overwrite it
        db.rollback()
        row = _find(db, record_id, field_id)
        _assign(row, columns)
        db.commit()
    db.refresh(row)
    return row


def cell_to_dict(row: CellValue) -> Dict[str, Any]:
    value = from_storage(row.value_type, row.text_value, row.number_value)
    return {
        "record_id": row.record_id,
        "field_id": row.field_id,
        "value_type": value.kind.value,
        "value": to_json(value),
    }

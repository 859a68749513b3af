# File: /gridbase/crud/tables.py | Version: 1.0 | Title: Table + Field CRUD helpers
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from gridbase.core.exceptions import Conflict
from gridbase.models.core_entities import DataTable
from gridbase.models.custom_fields import Field
from gridbase.models.view import View

logger = logging.getLogger(__name__)

DEFAULT_VIEW_NAME = "Grid view"


def create_table(db: Session, *, owner_id: str, name: str) -> DataTable:
    """A new table always starts with one default view."""
    table = DataTable(owner_id=str(owner_id), name=name)
    db.add(table)
    db.flush()
    db.add(View(table_id=table.id, name=DEFAULT_VIEW_NAME, is_default=True, hidden_field_ids=[]))
    db.commit()
    db.refresh(table)
    logger.info("Created table %s for owner %s", table.id, owner_id)
    return table


def get_table(db: Session, table_id: str) -> Optional[DataTable]:
    return db.get(DataTable, str(table_id))


def list_tables(db: Session, *, owner_id: str) -> List[DataTable]:
    return list(
        db.execute(
            select(DataTable)
            .where(DataTable.owner_id == str(owner_id))
            .order_by(DataTable.created_at.asc())
        ).scalars()
    )


def list_fields(db: Session, table_id: str) -> List[Field]:
    return list(
        db.execute(
            select(Field).where(Field.table_id == str(table_id)).order_by(Field.order.asc(), Field.id.asc())
        ).scalars()
    )


def add_field(db: Session, *, table_id: str, name: str, field_type: str) -> Field:
    existing = db.execute(
        select(Field.id).where(Field.table_id == str(table_id), Field.name == name)
    ).first()
    if existing:
        raise Conflict(f"Field '{name}' already exists in this table")

    last = db.execute(
        select(func.max(Field.order)).where(Field.table_id == str(table_id))
    ).scalar()
    field = Field(
        table_id=str(table_id),
        name=name,
        field_type=field_type,
        order=0 if last is None else last + 1,
    )
    db.add(field)
    db.commit()
    db.refresh(field)
    return field

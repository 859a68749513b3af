# File: /gridbase/core/permissions.py | Version: 1.0 | Title: Ownership checks for tables, views and records
"""
Every table has exactly one owner, and only the owner may read or change the
table, its fields, records, cells and views. Each check resolves the object
first (NotFound when it does not exist) and then the owner (Forbidden).
"""
from __future__ import annotations

from typing import Any

from fastapi import Depends
from sqlalchemy.orm import Session

from gridbase.core.exceptions import Forbidden, NotFound
from gridbase.crud import records as crud_records
from gridbase.crud import tables as crud_tables
from gridbase.crud import view as crud_view
from gridbase.db.session import get_db
from gridbase.models import DataTable, Record, User, View
from gridbase.security import get_current_user


def require_table_owner(db: Session, *, table_id: Any, user: User) -> DataTable:
    table = crud_tables.get_table(db, table_id)
    if table is None:
        raise NotFound("Table not found")
    if str(table.owner_id) != str(user.id):
        raise Forbidden("You do not have access to this table")
    return table


def require_view_owner(db: Session, *, view_id: Any, user: User) -> View:
    view = crud_view.get_view(db, view_id)
    if view is None:
        raise NotFound("View not found")
    require_table_owner(db, table_id=view.table_id, user=user)
    return view


def require_record_owner(db: Session, *, record_id: Any, user: User) -> Record:
    record = crud_records.get_record(db, record_id)
    if record is None:
        raise NotFound("Record not found")
    require_table_owner(db, table_id=record.table_id, user=user)
    return record


# ----- FastAPI dependencies -----


def owned_table(
    table_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DataTable:
    """
    Example:
      @router.get("/tables/{table_id}/fields")
      def list_fields(table: DataTable = Depends(owned_table)): ...
    """
    return require_table_owner(db, table_id=table_id, user=current_user)


def owned_view(
    view_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> View:
    return require_view_owner(db, view_id=view_id, user=current_user)


def owned_record(
    record_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Record:
    return require_record_owner(db, record_id=record_id, user=current_user)

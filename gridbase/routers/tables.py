# File: /gridbase/routers/tables.py | Version: 1.0 | Title: Tables Router (tables, fields, records, cells, page queries)
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gridbase.core.permissions import owned_record, owned_table
from gridbase.crud import cells as crud_cells
from gridbase.crud import records as crud_records
from gridbase.crud import tables as crud_tables
from gridbase.db.session import get_db
from gridbase.models import DataTable, Record, User
from gridbase.query.executor import list_page
from gridbase.schemas.cells import CellValueOut, CellValueUpdate
from gridbase.schemas.page import PageOut, PageQuery
from gridbase.schemas.table import (
    BulkInsertIn,
    BulkInsertOut,
    FieldCreate,
    FieldOut,
    RecordCreate,
    RecordOut,
    TableCreate,
    TableOut,
)
from gridbase.security import get_current_user

router = APIRouter(tags=["Tables"])


# ----------------------------
# Tables
# ----------------------------
@router.post("/tables", response_model=TableOut, status_code=status.HTTP_201_CREATED)
def create_table(
    data: TableCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_tables.create_table(db, owner_id=str(current_user.id), name=data.name)


@router.get("/tables", response_model=List[TableOut])
def list_tables(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_tables.list_tables(db, owner_id=str(current_user.id))


@router.get("/tables/{table_id}", response_model=TableOut)
def get_table(table: DataTable = Depends(owned_table)):
    return table


# ----------------------------
# Fields
# ----------------------------
@router.get("/tables/{table_id}/fields", response_model=List[FieldOut])
def list_fields(
    table: DataTable = Depends(owned_table),
    db: Session = Depends(get_db),
):
    return crud_tables.list_fields(db, table.id)


@router.post(
    "/tables/{table_id}/fields",
    response_model=FieldOut,
    status_code=status.HTTP_201_CREATED,
)
def add_field(
    data: FieldCreate,
    table: DataTable = Depends(owned_table),
    db: Session = Depends(get_db),
):
    return crud_tables.add_field(db, table_id=table.id, name=data.name, field_type=data.type.value)


# ----------------------------
# Records
# ----------------------------
@router.post(
    "/tables/{table_id}/records",
    response_model=RecordOut,
    status_code=status.HTTP_201_CREATED,
)
def create_record(
    data: RecordCreate,
    table: DataTable = Depends(owned_table),
    db: Session = Depends(get_db),
):
    return crud_records.create_record(db, table_id=table.id, cells=data.cells)


@router.post("/tables/{table_id}/records/bulk", response_model=BulkInsertOut)
def bulk_insert(
    data: BulkInsertIn,
    table: DataTable = Depends(owned_table),
    db: Session = Depends(get_db),
):
    inserted = crud_records.insert_rows(db, table_id=table.id, rows=data.rows)
    return {"inserted": inserted}


@router.post("/tables/{table_id}/records/query", response_model=PageOut)
def query_records(
    query: PageQuery,
    table: DataTable = Depends(owned_table),
    db: Session = Depends(get_db),
):
    """One page of rows; filters/sorts here are ad-hoc and layered on ``view_id``."""
    return list_page(
        db,
        table.id,
        view_id=query.view_id,
        filters=query.filters,
        sorts=query.sorts,
        search=query.search,
        limit=query.limit,
        cursor=query.cursor,
    )


@router.delete("/records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_record(
    record: Record = Depends(owned_record),
    db: Session = Depends(get_db),
):
    crud_records.delete_record(db, record)


# ----------------------------
# Cells
# ----------------------------
@router.put("/records/{record_id}/cells/{field_id}", response_model=CellValueOut)
def upsert_cell(
    field_id: str,
    data: CellValueUpdate,
    record: Record = Depends(owned_record),
    db: Session = Depends(get_db),
):
    row = crud_cells.upsert_cell(db, record_id=record.id, field_id=field_id, value=data.value)
    return crud_cells.cell_to_dict(row)

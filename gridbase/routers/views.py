# File: /gridbase/routers/views.py | Version: 1.0 | Title: Saved Views Router (CRUD, default, clauses, apply)
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gridbase.core.permissions import owned_table, owned_view
from gridbase.crud import view as crud_view
from gridbase.db.session import get_db
from gridbase.models import DataTable, View
from gridbase.query.executor import list_page
from gridbase.schemas.filters import (
    FilterIn,
    FilterOut,
    FilterUpdate,
    SortIn,
    SortOut,
    SortUpdate,
)
from gridbase.schemas.page import PageOut
from gridbase.schemas.view import ViewCreate, ViewOut, ViewUpdate

router = APIRouter(tags=["Views"])


# ----------------------------
# CRUD endpoints
# ----------------------------
@router.get(
    "/tables/{table_id}/views",
    response_model=List[ViewOut],
    summary="List a table's saved views (default first)",
)
def list_views(
    table: DataTable = Depends(owned_table),
    db: Session = Depends(get_db),
):
    return crud_view.list_views(db, table.id)


@router.post(
    "/tables/{table_id}/views",
    response_model=ViewOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a saved view",
)
def create_view(
    data: ViewCreate,
    table: DataTable = Depends(owned_table),
    db: Session = Depends(get_db),
):
    return crud_view.create_view(db, table_id=table.id, data=data)


@router.get("/views/{view_id}", response_model=ViewOut, summary="Get a saved view")
def get_view(view: View = Depends(owned_view)):
    return view


@router.patch("/views/{view_id}", response_model=ViewOut, summary="Update a saved view")
def update_view(
    data: ViewUpdate,
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    return crud_view.update_view(db, view, data)


@router.delete("/views/{view_id}", summary="Delete a saved view (never the last one)")
def delete_view(
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    default = crud_view.delete_view(db, view)
    return {"detail": "View deleted", "default_view_id": default.id if default else None}


@router.post(
    "/views/{view_id}/default",
    response_model=ViewOut,
    summary="Make this the table's default view",
)
def make_default(
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    return crud_view.set_default(db, table_id=view.table_id, view_id=view.id)


# ----------------------------
# APPLY: /views/{id}/records
# ----------------------------
@router.get(
    "/views/{view_id}/records",
    response_model=PageOut,
    summary="One page of the table's rows through this view",
)
def view_records(
    limit: Optional[int] = Query(default=None),
    cursor: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    return list_page(
        db, view.table_id, view_id=view.id, search=search, limit=limit, cursor=cursor
    )


# ----------------------------
# Filter clauses
# ----------------------------
@router.get("/views/{view_id}/filters", response_model=List[FilterOut])
def list_filters(view: View = Depends(owned_view), db: Session = Depends(get_db)):
    return crud_view.list_filters(db, view)


@router.post(
    "/views/{view_id}/filters",
    response_model=FilterOut,
    status_code=status.HTTP_201_CREATED,
)
def add_filter(
    data: FilterIn,
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    return crud_view.add_filter(db, view, data)


@router.patch("/views/{view_id}/filters/{filter_id}", response_model=FilterOut)
def update_filter(
    filter_id: str,
    data: FilterUpdate,
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    return crud_view.update_filter(db, view, filter_id, data)


@router.delete("/views/{view_id}/filters/{filter_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_filter(
    filter_id: str,
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    crud_view.delete_filter(db, view, filter_id)


# ----------------------------
# Sort clauses
# ----------------------------
@router.get("/views/{view_id}/sorts", response_model=List[SortOut])
def list_sorts(view: View = Depends(owned_view), db: Session = Depends(get_db)):
    return crud_view.list_sorts(db, view)


@router.post(
    "/views/{view_id}/sorts",
    response_model=SortOut,
    status_code=status.HTTP_201_CREATED,
)
def add_sort(
    data: SortIn,
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    return crud_view.add_sort(db, view, data)


@router.patch("/views/{view_id}/sorts/{sort_id}", response_model=SortOut)
def update_sort(
    sort_id: str,
    data: SortUpdate,
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    return crud_view.update_sort(db, view, sort_id, data)


@router.delete("/views/{view_id}/sorts/{sort_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_sort(
    sort_id: str,
    view: View = Depends(owned_view),
    db: Session = Depends(get_db),
):
    crud_view.delete_sort(db, view, sort_id)

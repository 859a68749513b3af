# File: /gridbase/query/executor.py | Version: 1.0 | Title: Query Executor (view/ad-hoc state -> one page of rows)
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from gridbase.core.exceptions import InvalidReference, NotFound
from gridbase.models.core_entities import Record
from gridbase.models.custom_fields import CellValue
from gridbase.models.view import View
from gridbase.query import pagination
from gridbase.query.fields import FieldRegistry
from gridbase.query.predicates import compile_predicate
from gridbase.query.sorting import apply_ordering, resolve_sorts
from gridbase.query.values import NULL, Value, from_storage, to_json

logger = logging.getLogger(__name__)


@dataclass
class Page:
    columns: List[Dict[str, Any]]
    rows: List[Dict[str, Any]]
    has_more: bool
    next_cursor: Optional[str] = None
    limit: int = 0
    strategy: str = "keyset"
    view_id: Optional[str] = None
    hidden_field_ids: List[str] = field(default_factory=list)


def _resolve_view(db: Session, table_id: str, view_id: Optional[str]) -> Optional[View]:
    if not view_id:
        return None
    view = db.get(View, str(view_id))
    if view is None:
        raise NotFound("View not found")
    if view.table_id != table_id:
        raise InvalidReference(f"View {view_id} does not belong to table {table_id}")
    return view


def _load_cells(db: Session, record_ids: Sequence[str]) -> Dict[str, Dict[str, Value]]:
    cells: Dict[str, Dict[str, Value]] = {rid: {} for rid in record_ids}
    if not record_ids:
        return cells
    rows = db.execute(
        select(
            CellValue.record_id,
            CellValue.field_id,
            CellValue.value_type,
            CellValue.text_value,
            CellValue.number_value,
        ).where(CellValue.record_id.in_(list(record_ids)))
    ).all()
    for r in rows:
        cells[r.record_id][r.field_id] = from_storage(r.value_type, r.text_value, r.number_value)
    return cells


def list_page(
    db: Session,
    table_id: str,
    *,
    view_id: Optional[str] = None,
    filters: Optional[Sequence[Any]] = None,
    sorts: Optional[Sequence[Any]] = None,
    search: Optional[str] = None,
    limit: Optional[int] = None,
    cursor: Optional[str] = None,
) -> Page:
    """
    One page of a table's rows.

    With ``view_id`` the saved view's filters, sorts and hidden columns apply.
    Ad-hoc ``filters`` are ANDed with the view's; non-empty ad-hoc ``sorts``
    replace the view's. Without a view the table reads unfiltered, in
    insertion order. Authorization is the caller's job.
    """
    table_id = str(table_id)
    registry = FieldRegistry.load(db, table_id)
    view = _resolve_view(db, table_id, view_id)

    view_filters = list(view.filters) if view is not None else []
    view_sorts = list(view.sorts) if view is not None else []
    hidden = set(view.hidden_field_ids or []) if view is not None else set()

    predicate = compile_predicate([*view_filters, *(filters or [])], registry, search)
    keys = resolve_sorts(sorts if sorts else view_sorts, registry)

    size = pagination.clamp_limit(limit)
    strategy = pagination.plan(bool(keys), cursor)
    logger.debug(
        "list_page table=%s view=%s predicate=%r sorts=%r strategy=%r limit=%d",
        table_id, view_id, predicate, keys, strategy, size,
    )

    stmt = select(Record.id, Record.created_at).where(
        Record.table_id == table_id, predicate.to_sql()
    )
    stmt = apply_ordering(stmt, keys)
    stmt = pagination.apply(stmt, strategy, size)
    fetched = [(r.id, r.created_at) for r in db.execute(stmt).all()]

    page, has_more, next_cursor = pagination.finish(fetched, strategy, size)
    record_ids = [rid for rid, _ in page]
    cells = _load_cells(db, record_ids)

    columns = [
        {
            "id": f.id,
            "name": f.name,
            "type": f.field_type,
            "order": f.order,
            "hidden": f.id in hidden,
        }
        for f in registry
    ]
    rows = []
    for rid in record_ids:
        row: Dict[str, Any] = {"id": rid}
        for f in registry:
            row[f.id] = to_json(cells[rid].get(f.id, NULL))
        rows.append(row)

    return Page(
        columns=columns,
        rows=rows,
        has_more=has_more,
        next_cursor=next_cursor,
        limit=size,
        strategy="offset" if keys else "keyset",
        view_id=view.id if view is not None else None,
        hidden_field_ids=sorted(hidden),
    )

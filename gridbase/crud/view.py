# File: /gridbase/crud/view.py | Version: 1.0 | Title: View Store (saved views, clauses, single-default invariant)
"""
Saved views for a table.

The default flag is only ever written by ``_move_default`` and
``ensure_default``; every public mutation that can affect it commits once, so
no reader sees a table with zero or two default views.
"""
from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any, Iterable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from gridbase.core.exceptions import InvalidReference, InvalidViewUpdate, LastViewDeletion, NotFound
from gridbase.models.view import View, ViewFilter, ViewSort
from gridbase.query.fields import FieldRegistry
from gridbase.query.predicates import compile_filter, operand_text
from gridbase.query.sorting import resolve_sorts

logger = logging.getLogger(__name__)


def _enum_value(raw: Any) -> Any:
    return getattr(raw, "value", raw)


# ---- Validation ----


def _check_filters(registry: FieldRegistry, filters: Iterable[Any]) -> None:
    # compiling is the validation: bad fields/operators raise here
    for f in filters:
        compile_filter(f, registry)


def _check_sorts(registry: FieldRegistry, sorts: Sequence[Any]) -> None:
    resolve_sorts(sorts, registry)


def _check_hidden(registry: FieldRegistry, field_ids: Iterable[str]) -> List[str]:
    out: List[str] = []
    for fid in field_ids:
        registry.require(fid)
        if fid not in out:
            out.append(fid)
    return out


def _filter_rows(filters: Sequence[Any]) -> List[ViewFilter]:
    return [
        ViewFilter(
            field_id=f.field_id,
            operator=_enum_value(f.operator),
            value=None if f.value is None else operand_text(f.value),
            position=i,
        )
        for i, f in enumerate(filters)
    ]


def _sort_rows(sorts: Sequence[Any]) -> List[ViewSort]:
    return [
        ViewSort(
            field_id=s.field_id,
            direction=_enum_value(s.direction),
            order=s.order if getattr(s, "order", None) is not None else i,
        )
        for i, s in enumerate(sorts)
    ]


# ---- Default-view invariant ----


def _views_of(db: Session, table_id: str) -> List[View]:
    db.flush()
    return list(
        db.execute(
            select(View)
            .where(View.table_id == table_id)
            .order_by(View.created_at.desc(), View.id.desc())
        ).scalars()
    )


def _move_default(db: Session, table_id: str, view_id: str) -> None:
    for v in _views_of(db, table_id):
        v.is_default = v.id == view_id


def ensure_default(db: Session, table_id: str, *, commit: bool = True) -> Optional[View]:
    """
    Repair the default flag: keep the newest default if there are several,
    promote the newest view if there is none. Returns the default view, or
    None when the table has no views left (readers then use an implicit
    unfiltered view).
    """
    views = _views_of(db, str(table_id))
    if not views:
        return None
    defaults = [v for v in views if v.is_default]
    chosen = defaults[0] if defaults else views[0]
    if len(defaults) != 1:
        logger.info("Default view of table %s repaired -> %s", table_id, chosen.id)
        for v in views:
            v.is_default = v is chosen
    if commit:
        db.commit()
    return chosen


def set_default(db: Session, *, table_id: str, view_id: str) -> View:
    view = get_view(db, view_id)
    if view is None:
        raise NotFound("View not found")
    if view.table_id != str(table_id):
        raise InvalidReference(f"View {view_id} does not belong to table {table_id}")
    _move_default(db, view.table_id, view.id)
    db.commit()
    db.refresh(view)
    logger.info("Default view of table %s -> %s", table_id, view.id)
    return view


# ---- Views ----


def get_view(db: Session, view_id: str) -> Optional[View]:
    return db.get(View, str(view_id))


def get_default_view(db: Session, table_id: str) -> Optional[View]:
    return db.execute(
        select(View).where(View.table_id == str(table_id), View.is_default.is_(True)).limit(1)
    ).scalar_one_or_none()


def list_views(db: Session, table_id: str) -> List[View]:
    return list(
        db.execute(
            select(View)
            .where(View.table_id == str(table_id))
            .order_by(View.is_default.desc(), View.created_at.desc())
        ).scalars()
    )


def create_view(db: Session, *, table_id: str, data) -> View:
    """
    data: schemas.view.ViewCreate
    The first view of a table is always the default.
    """
    table_id = str(table_id)
    registry = FieldRegistry.load(db, table_id)
    filters = list(data.filters or [])
    sorts = list(data.sorts or [])
    _check_filters(registry, filters)
    _check_sorts(registry, sorts)
    hidden = _check_hidden(registry, data.hidden_field_ids or [])

    has_views = db.execute(select(View.id).where(View.table_id == table_id).limit(1)).first()
    view = View(
        table_id=table_id,
        name=data.name,
        hidden_field_ids=hidden,
        is_default=False,
        filters=_filter_rows(filters),
        sorts=_sort_rows(sorts),
    )
    db.add(view)
    db.flush()
    if data.is_default or not has_views:
        _move_default(db, table_id, view.id)
    db.commit()
    db.refresh(view)
    return view


def update_view(db: Session, view: View, data) -> View:
    """
    data: schemas.view.ViewUpdate; only fields the caller sent are applied.
    Supplied filters/sorts replace the stored lists.
    """
    sent = data.model_fields_set
    registry = FieldRegistry.load(db, view.table_id)

    if "is_default" in sent and data.is_default is False and view.is_default:
        raise InvalidViewUpdate(
            "The default view cannot be unset; make another view the default instead"
        )

    # validate everything before touching the row
    filters = list(data.filters or []) if "filters" in sent else None
    sorts = list(data.sorts or []) if "sorts" in sent else None
    hidden = None
    if filters is not None:
        _check_filters(registry, filters)
    if sorts is not None:
        _check_sorts(registry, sorts)
    if "hidden_field_ids" in sent:
        hidden = _check_hidden(registry, data.hidden_field_ids or [])

    if "name" in sent and data.name is not None:
        view.name = data.name
    if filters is not None:
        view.filters = _filter_rows(filters)
    if sorts is not None:
        view.sorts = _sort_rows(sorts)
    if hidden is not None:
        view.hidden_field_ids = hidden
    if data.is_default:
        _move_default(db, view.table_id, view.id)

    db.commit()
    db.refresh(view)
    return view


def delete_view(db: Session, view: View) -> Optional[View]:
    """Delete ``view``; returns the table's default view afterwards."""
    table_id = view.table_id
    count = db.execute(select(func.count(View.id)).where(View.table_id == table_id)).scalar() or 0
    if count <= 1:
        raise LastViewDeletion("A table must keep at least one view")
    db.delete(view)
    default = ensure_default(db, table_id, commit=False)
    db.commit()
    return default


# ---- Filter clauses ----


def list_filters(db: Session, view: View) -> List[ViewFilter]:
    return list(view.filters)


def get_filter(db: Session, view: View, filter_id: str) -> ViewFilter:
    row = db.get(ViewFilter, str(filter_id))
    if row is None or row.view_id != view.id:
        raise NotFound("Filter not found")
    return row


def add_filter(db: Session, view: View, data) -> ViewFilter:
    compile_filter(data, FieldRegistry.load(db, view.table_id))
    last = db.execute(
        select(func.max(ViewFilter.position)).where(ViewFilter.view_id == view.id)
    ).scalar()
    (row,) = _filter_rows([data])
    row.position = 0 if last is None else last + 1
    view.filters.append(row)
    db.commit()
    db.refresh(row)
    return row


def update_filter(db: Session, view: View, filter_id: str, data) -> ViewFilter:
    row = get_filter(db, view, filter_id)
    sent = data.model_fields_set
    candidate = SimpleNamespace(field_id=row.field_id, operator=row.operator, value=row.value)
    if "field_id" in sent and data.field_id is not None:
        candidate.field_id = data.field_id
    if "operator" in sent and data.operator is not None:
        candidate.operator = _enum_value(data.operator)
    if "value" in sent:
        candidate.value = None if data.value is None else operand_text(data.value)
    # the clause is validated as a whole
    compile_filter(candidate, FieldRegistry.load(db, view.table_id))

    row.field_id = candidate.field_id
    row.operator = candidate.operator
    row.value = candidate.value
    db.commit()
    db.refresh(row)
    return row


def delete_filter(db: Session, view: View, filter_id: str) -> None:
    row = get_filter(db, view, filter_id)
    view.filters.remove(row)
    db.commit()


# ---- Sort clauses ----


def list_sorts(db: Session, view: View) -> List[ViewSort]:
    return sorted(view.sorts, key=lambda s: s.order)


def get_sort(db: Session, view: View, sort_id: str) -> ViewSort:
    row = db.get(ViewSort, str(sort_id))
    if row is None or row.view_id != view.id:
        raise NotFound("Sort not found")
    return row


def add_sort(db: Session, view: View, data) -> ViewSort:
    _check_sorts(FieldRegistry.load(db, view.table_id), [data])
    (row,) = _sort_rows([data])
    if data.order is None:
        last = db.execute(
            select(func.max(ViewSort.order)).where(ViewSort.view_id == view.id)
        ).scalar()
        row.order = 0 if last is None else last + 1
    view.sorts.append(row)
    db.commit()
    db.refresh(row)
    return row


def update_sort(db: Session, view: View, sort_id: str, data) -> ViewSort:
    row = get_sort(db, view, sort_id)
    sent = data.model_fields_set
    candidate = SimpleNamespace(field_id=row.field_id, direction=row.direction, order=row.order)
    if "field_id" in sent and data.field_id is not None:
        candidate.field_id = data.field_id
    if "direction" in sent and data.direction is not None:
        candidate.direction = _enum_value(data.direction)
    if "order" in sent and data.order is not None:
        candidate.order = data.order
    _check_sorts(FieldRegistry.load(db, view.table_id), [candidate])

    row.field_id = candidate.field_id
    row.direction = candidate.direction
    row.order = candidate.order
    db.commit()
    db.refresh(row)
    return row


def delete_sort(db: Session, view: View, sort_id: str) -> None:
    row = get_sort(db, view, sort_id)
    view.sorts.remove(row)
    db.commit()

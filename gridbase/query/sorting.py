# File: /gridbase/query/sorting.py | Version: 1.0 | Title: Sort Key Resolver (sort clauses -> ORDER BY / comparator)
"""
Multi-column ordering over per-cell facts.

Missing and Null cells take the field type's zero value ("" or 0), so they
sort as the minimum: first under asc, last under desc. After the explicit
sorts every ordering ends with Record.created_at then Record.id, both
ascending; that tail is not configurable because pagination depends on a
total order.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Mapping, Sequence, Tuple

from sqlalchemy import and_, func
from sqlalchemy.orm import aliased

from gridbase.models.core_entities import Record
from gridbase.models.custom_fields import CellValue
from gridbase.query.fields import FieldRegistry
from gridbase.query.values import NULL, FieldType, Value, compare
from gridbase.schemas.filters import SortDirection


@dataclass(frozen=True)
class SortKey:
    field_id: str
    field_type: FieldType
    direction: SortDirection


@dataclass(frozen=True)
class RowSnapshot:
    """What the in-process comparator needs to know about one record."""

    id: str
    created_at: datetime
    cells: Mapping[str, Value]

    def lookup(self, field_id: str) -> Value:
        return self.cells.get(field_id, NULL)


def _direction(raw: Any) -> SortDirection:
    return SortDirection(getattr(raw, "value", raw))


def resolve_sorts(sorts: Iterable[Any], registry: FieldRegistry) -> List[SortKey]:
    """
    ``sorts`` items need ``field_id`` and ``direction``; an ``order`` attribute
    sets priority (lower first) and falls back to list position.
    """
    indexed = []
    for position, s in enumerate(sorts):
        field = registry.require(s.field_id)
        order = getattr(s, "order", None)
        indexed.append(
            (
                order if order is not None else position,
                position,
                SortKey(field.id, FieldType(field.field_type), _direction(s.direction)),
            )
        )
    indexed.sort(key=lambda item: (item[0], item[1]))
    return [key for _, _, key in indexed]


def apply_ordering(stmt, keys: Sequence[SortKey]):
    """Outer-join one CellValue alias per key and order by the coalesced value."""
    orders = []
    for key in keys:
        cell = aliased(CellValue)
        stmt = stmt.outerjoin(
            cell,
            and_(cell.record_id == Record.id, cell.field_id == key.field_id),
        )
        if key.field_type is FieldType.number:
            expr = func.coalesce(cell.number_value, 0.0)
        else:
            expr = func.coalesce(cell.text_value, "")
        orders.append(expr.desc() if key.direction is SortDirection.desc else expr.asc())
    orders.extend([Record.created_at.asc(), Record.id.asc()])
    return stmt.order_by(*orders)


def compare_rows(keys: Sequence[SortKey], a: RowSnapshot, b: RowSnapshot) -> int:
    for key in keys:
        result = compare(a.lookup(key.field_id), b.lookup(key.field_id), key.field_type)
        if result:
            return -result if key.direction is SortDirection.desc else result
    tail_a: Tuple[datetime, str] = (a.created_at, a.id)
    tail_b: Tuple[datetime, str] = (b.created_at, b.id)
    return (tail_a > tail_b) - (tail_a < tail_b)


def row_comparator(keys: Sequence[SortKey]) -> Callable[[RowSnapshot], Any]:
    """A ``sorted(key=...)`` adapter over :func:`compare_rows`."""
    return cmp_to_key(lambda a, b: compare_rows(keys, a, b))

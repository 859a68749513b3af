# File: /gridbase/query/predicates.py | Version: 1.0 | Title: Predicate Compiler (filter clauses -> predicate AST -> SQL)
"""
Filter clauses and the search term compile to a small predicate tree.

Every leaf reads exactly one (record, field) cell. The tree lowers to a
SQLAlchemy boolean expression built from correlated EXISTS subqueries over
``cell_value`` with every user value bound as a parameter, and it can also be
evaluated in-process against a cell lookup, which the tests use as the
reference semantics for the SQL lowering.

Empty cells (no row, explicit Null, or text "") never satisfy equals /
greaterThan / lessThan; they satisfy isEmpty and notContains.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple, Union

from sqlalchemy import and_, exists, false, func, not_, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from gridbase.core.exceptions import InvalidOperator
from gridbase.models.core_entities import Record
from gridbase.models.custom_fields import CellValue
from gridbase.query.fields import FieldRegistry
from gridbase.query.values import (
    FieldType,
    Value,
    fold,
    format_number,
    is_empty,
    parse_number,
    textualize,
    to_number,
)
from gridbase.schemas.filters import FilterOperator

Lookup = Callable[[str], Value]


class CompareOp(str, Enum):
    eq = "eq"
    gt = "gt"
    lt = "lt"


def _cell_exists(field_id: str, *conditions) -> ColumnElement[bool]:
    return exists(
        select(CellValue.id).where(
            CellValue.record_id == Record.id,
            CellValue.field_id == field_id,
            *conditions,
        )
    )


def _non_empty():
    return (
        CellValue.value_type != "null",
        CellValue.text_value.is_not(None),
        CellValue.text_value != "",
    )


def _apply_op(op: CompareOp, left: Any, right: Any):
    if op is CompareOp.eq:
        return left == right
    if op is CompareOp.gt:
        return left > right
    return left < right


class Predicate:
    def evaluate(self, lookup: Lookup) -> bool:
        raise NotImplementedError

    def to_sql(self) -> ColumnElement[bool]:
        raise NotImplementedError


@dataclass(frozen=True)
class Const(Predicate):
    value: bool

    def evaluate(self, lookup: Lookup) -> bool:
        return self.value

    def to_sql(self) -> ColumnElement[bool]:
        return true() if self.value else false()


@dataclass(frozen=True)
class And(Predicate):
    children: Tuple[Predicate, ...]

    def evaluate(self, lookup: Lookup) -> bool:
        return all(c.evaluate(lookup) for c in self.children)

    def to_sql(self) -> ColumnElement[bool]:
        if not self.children:
            return true()
        return and_(*(c.to_sql() for c in self.children))


@dataclass(frozen=True)
class Or(Predicate):
    children: Tuple[Predicate, ...]

    def evaluate(self, lookup: Lookup) -> bool:
        return any(c.evaluate(lookup) for c in self.children)

    def to_sql(self) -> ColumnElement[bool]:
        if not self.children:
            return false()
        return or_(*(c.to_sql() for c in self.children))


@dataclass(frozen=True)
class IsEmpty(Predicate):
    field_id: str
    negate: bool = False

    def evaluate(self, lookup: Lookup) -> bool:
        return is_empty(lookup(self.field_id)) != self.negate

    def to_sql(self) -> ColumnElement[bool]:
        has_value = _cell_exists(self.field_id, *_non_empty())
        return has_value if self.negate else not_(has_value)


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive substring test on the textualized cell."""

    field_id: str
    term: str
    negate: bool = False

    def evaluate(self, lookup: Lookup) -> bool:
        found = fold(self.term) in fold(textualize(lookup(self.field_id)))
        return found != self.negate

    def to_sql(self) -> ColumnElement[bool]:
        if not self.term:
            # every text contains ""
            return false() if self.negate else true()
        found = _cell_exists(
            self.field_id,
            CellValue.folded_value.contains(fold(self.term), autoescape=True),
        )
        return not_(found) if self.negate else found


@dataclass(frozen=True)
class Compare(Predicate):
    field_id: str
    field_type: FieldType
    op: CompareOp
    operand: Union[str, float]

    def evaluate(self, lookup: Lookup) -> bool:
        value = lookup(self.field_id)
        if is_empty(value):
            return False
        if self.field_type is FieldType.number:
            return _apply_op(self.op, to_number(value), self.operand)
        return _apply_op(self.op, textualize(value), self.operand)

    def to_sql(self) -> ColumnElement[bool]:
        if self.field_type is FieldType.number:
            # text that does not parse reads as 0
            left = func.coalesce(CellValue.number_value, 0.0)
        else:
            left = CellValue.text_value
        return _cell_exists(self.field_id, *_non_empty(), _apply_op(self.op, left, self.operand))


_COMPARE_OPS = {
    FilterOperator.equals: CompareOp.eq,
    FilterOperator.greater_than: CompareOp.gt,
    FilterOperator.less_than: CompareOp.lt,
}


def _operator(raw: Any) -> FilterOperator:
    try:
        return FilterOperator(getattr(raw, "value", raw))
    except ValueError:
        raise InvalidOperator(f"Unknown filter operator: {raw!r}")


def operand_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(float(value))
    raise InvalidOperator(f"Filter value must be text or a number, got {value!r}")


def compile_filter(flt: Any, registry: FieldRegistry) -> Predicate:
    """
    Compile one clause. ``flt`` is anything with ``field_id``, ``operator`` and
    ``value`` attributes: a stored ViewFilter or a FilterIn payload.
    """
    field = registry.require(flt.field_id)
    op = _operator(flt.operator)
    field_type = FieldType(field.field_type)

    if op is FilterOperator.is_empty:
        return IsEmpty(field.id)
    if op is FilterOperator.is_not_empty:
        return IsEmpty(field.id, negate=True)

    if flt.value is None:
        raise InvalidOperator(f"Operator {op.value} requires a value")
    text = operand_text(flt.value)

    if op is FilterOperator.contains:
        return Contains(field.id, text)
    if op is FilterOperator.not_contains:
        return Contains(field.id, text, negate=True)

    compare_op = _COMPARE_OPS[op]
    if field_type is FieldType.number:
        number = parse_number(text)
        if number is None:
            # partially typed input: match nothing rather than fail
            return Const(False)
        return Compare(field.id, field_type, compare_op, number)
    return Compare(field.id, field_type, compare_op, text)


def compile_search(term: Optional[str], registry: FieldRegistry) -> Optional[Predicate]:
    if term is None or not term.strip():
        return None
    term = term.strip()
    return Or(tuple(Contains(f.id, term) for f in registry))


def compile_predicate(
    filters: Iterable[Any],
    registry: FieldRegistry,
    search: Optional[str] = None,
) -> Predicate:
    parts: list[Predicate] = [compile_filter(f, registry) for f in filters]
    searched = compile_search(search, registry)
    if searched is not None:
        parts.append(searched)
    return conjoin(parts)


def conjoin(parts: Sequence[Predicate]) -> Predicate:
    if not parts:
        return Const(True)
    if len(parts) == 1:
        return parts[0]
    return And(tuple(parts))

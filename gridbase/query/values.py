# File: /gridbase/query/values.py | Version: 1.0 | Title: Cell Value Model (tagged value, coercion, comparison)
"""
The typed content of one cell.

A cell is Text, Number or Null. Absent cells (no CellValue row) are read as
Null, so every comparison site sees the same three cases. Coercion never
raises: anything that is not a string or a finite number becomes Null.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class ValueKind(str, Enum):
    text = "text"
    number = "number"
    null = "null"


class FieldType(str, Enum):
    text = "text"
    number = "number"


@dataclass(frozen=True)
class Value:
    kind: ValueKind
    text: Optional[str] = None
    number: Optional[float] = None

    @classmethod
    def of_text(cls, text: str) -> "Value":
        return cls(ValueKind.text, text=text)

    @classmethod
    def of_number(cls, number: float) -> "Value":
        return cls(ValueKind.number, number=float(number))

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.null


NULL = Value(ValueKind.null)


def coerce(raw: Any) -> Value:
    # bool is an int subclass but is not a cell type
    if raw is None or isinstance(raw, bool):
        return NULL
    if isinstance(raw, str):
        return Value.of_text(raw)
    if isinstance(raw, (int, float)):
        number = float(raw)
        if not math.isfinite(number):
            return NULL
        return Value.of_number(number)
    return NULL


def parse_number(text: Optional[str]) -> Optional[float]:
    """Parse user text as a finite number; None when it is not one."""
    if text is None:
        return None
    stripped = text.strip()
    if not stripped:
        return None
    try:
        number = float(stripped)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def format_number(number: float) -> str:
    if number.is_integer() and abs(number) < 1e16:
        return str(int(number))
    return repr(number)


def textualize(value: Value) -> str:
    if value.kind is ValueKind.text:
        return value.text or ""
    if value.kind is ValueKind.number:
        return format_number(value.number)
    return ""


def to_number(value: Value) -> float:
    """Numeric coercion used by number fields: unparseable and empty read as 0."""
    if value.kind is ValueKind.number:
        return value.number
    if value.kind is ValueKind.text:
        parsed = parse_number(value.text)
        return parsed if parsed is not None else 0.0
    return 0.0


def compare(a: Value, b: Value, field_type: Union[FieldType, str]) -> int:
    if FieldType(field_type) is FieldType.number:
        left, right = to_number(a), to_number(b)
    else:
        # str comparison is by code point
        left, right = textualize(a), textualize(b)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def fold(text: str) -> str:
    """Case-insensitive matching key; SQL LOWER() is ASCII-only on SQLite, so it is stored."""
    return text.casefold()


def is_empty(value: Value) -> bool:
    return textualize(value) == ""


def to_json(value: Value) -> Union[str, int, float, None]:
    if value.kind is ValueKind.text:
        return value.text
    if value.kind is ValueKind.number:
        if value.number.is_integer() and abs(value.number) < 1e16:
            return int(value.number)
        return value.number
    return None


def storage_columns(value: Value) -> dict[str, Any]:
    """Column values for a CellValue row holding ``value``."""
    if value.kind is ValueKind.null:
        return {
            "value_type": ValueKind.null.value,
            "text_value": None,
            "number_value": None,
            "folded_value": None,
        }
    if value.kind is ValueKind.number:
        return {
            "value_type": ValueKind.number.value,
            "text_value": textualize(value),
            "number_value": value.number,
            "folded_value": fold(textualize(value)),
        }
    return {
        "value_type": ValueKind.text.value,
        "text_value": value.text,
        "number_value": parse_number(value.text),
        "folded_value": fold(value.text),
    }


def from_storage(value_type: Optional[str], text_value: Optional[str], number_value: Optional[float]) -> Value:
    if value_type == ValueKind.number.value and number_value is not None:
        return Value.of_number(number_value)
    if value_type == ValueKind.text.value and text_value is not None:
        return Value.of_text(text_value)
    return NULL

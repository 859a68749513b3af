# File: /gridbase/schemas/cells.py | Version: 1.0 | Title: Cell Value schemas
from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel

from gridbase.query.values import ValueKind


class CellValueUpdate(BaseModel):
    value: Optional[Any] = None


class CellValueOut(BaseModel):
    record_id: str
    field_id: str
    value_type: ValueKind
    value: Optional[Union[str, int, float]] = None

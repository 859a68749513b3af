# File: /gridbase/schemas/table.py | Version: 1.0 | Title: Table, Field and Record schemas
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from gridbase.query.values import FieldType
from gridbase.schemas._base import ORMSchema


class TableCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class TableOut(ORMSchema):
    id: str
    owner_id: str
    name: str
    created_at: datetime


class FieldCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: FieldType = FieldType.text


class FieldOut(ORMSchema):
    id: str
    table_id: str
    name: str
    type: FieldType = Field(validation_alias="field_type")
    order: int


class RecordCreate(BaseModel):
    # {field_id: raw value}; raw values that are not text/number are stored as empty
    cells: Dict[str, Any] = Field(default_factory=dict)


class RecordOut(ORMSchema):
    id: str
    table_id: str
    created_at: datetime


class BulkInsertIn(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list, max_length=100_000)


class BulkInsertOut(BaseModel):
    inserted: int

# File: /gridbase/schemas/view.py | Version: 1.0 | Title: Pydantic v2 schemas for Saved Views
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from gridbase.schemas._base import ORMSchema
from gridbase.schemas.filters import FilterIn, FilterOut, SortIn, SortOut


class ViewCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    filters: List[FilterIn] = Field(default_factory=list)
    sorts: List[SortIn] = Field(default_factory=list)
    hidden_field_ids: List[str] = Field(default_factory=list)
    is_default: bool = False


class ViewUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    filters: Optional[List[FilterIn]] = None
    sorts: Optional[List[SortIn]] = None
    hidden_field_ids: Optional[List[str]] = None
    is_default: Optional[bool] = None


class ViewOut(ORMSchema):
    id: str
    table_id: str
    name: str
    is_default: bool
    hidden_field_ids: List[str] = Field(default_factory=list)
    filters: List[FilterOut] = Field(default_factory=list)
    sorts: List[SortOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

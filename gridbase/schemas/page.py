# File: /gridbase/schemas/page.py | Version: 1.0 | Title: Page query / page result schemas
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from gridbase.query.values import FieldType
from gridbase.schemas.filters import FilterIn, SortIn


class PageQuery(BaseModel):
    view_id: Optional[str] = None
    filters: List[FilterIn] = Field(default_factory=list)
    sorts: List[SortIn] = Field(default_factory=list)
    search: Optional[str] = None
    # clamped to [1, PAGE_LIMIT_MAX] by the planner rather than rejected
    limit: Optional[int] = None
    cursor: Optional[str] = None


class ColumnOut(BaseModel):
    id: str
    name: str
    type: FieldType
    order: int
    hidden: bool = False


class PageOut(BaseModel):
    columns: List[ColumnOut]
    rows: List[Dict[str, Any]]
    has_more: bool
    next_cursor: Optional[str] = None
    limit: int
    strategy: str
    view_id: Optional[str] = None
    hidden_field_ids: List[str] = Field(default_factory=list)

# File: /gridbase/schemas/filters.py | Version: 1.0 | Title: Filter & Sort Clause Schemas
from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FilterOperator(str, Enum):
    contains = "contains"
    not_contains = "notContains"
    equals = "equals"
    is_empty = "isEmpty"
    is_not_empty = "isNotEmpty"
    greater_than = "greaterThan"
    less_than = "lessThan"

    @classmethod
    def _missing_(cls, value):
        # short spellings used by older clients
        return {"gt": cls.greater_than, "lt": cls.less_than}.get(value)


class SortDirection(str, Enum):
    asc = "asc"
    desc = "desc"


def _reject_bool(v):
    # bool is an int subclass and would otherwise be stored as "1"/"0"
    if isinstance(v, bool):
        raise ValueError("value must be text or a number")
    return v


class FilterIn(BaseModel):
    field_id: str
    operator: FilterOperator
    value: Optional[Union[str, int, float]] = None

    _no_bool = field_validator("value", mode="before")(_reject_bool)


class FilterUpdate(BaseModel):
    field_id: Optional[str] = None
    operator: Optional[FilterOperator] = None
    value: Optional[Union[str, int, float]] = None

    _no_bool = field_validator("value", mode="before")(_reject_bool)


class FilterOut(BaseModel):
    id: str
    view_id: str
    field_id: str
    operator: FilterOperator
    value: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SortIn(BaseModel):
    field_id: str
    direction: SortDirection = SortDirection.asc
    order: Optional[int] = Field(default=None, ge=0)


class SortUpdate(BaseModel):
    field_id: Optional[str] = None
    direction: Optional[SortDirection] = None
    order: Optional[int] = Field(default=None, ge=0)


class SortOut(BaseModel):
    id: str
    view_id: str
    field_id: str
    direction: SortDirection
    order: int

    model_config = ConfigDict(from_attributes=True)

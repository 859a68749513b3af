# File: /gridbase/query/fields.py | Version: 1.0 | Title: Field Registry (per-request column lookup)
from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from gridbase.core.exceptions import InvalidReference
from gridbase.models.custom_fields import Field


class FieldRegistry:
    """
    Ordered columns of one table, indexed by id.

    Loaded fresh for every query: fields may be added between requests.
    """

    def __init__(self, table_id: str, fields: List[Field]):
        self.table_id = table_id
        self.fields = fields
        self._by_id: Dict[str, Field] = {f.id: f for f in fields}

    @classmethod
    def load(cls, db: Session, table_id: str) -> "FieldRegistry":
        rows = db.execute(
            select(Field)
            .where(Field.table_id == str(table_id))
            .order_by(Field.order.asc(), Field.id.asc())
        ).scalars().all()
        return cls(str(table_id), list(rows))

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def get(self, field_id: str) -> Optional[Field]:
        return self._by_id.get(str(field_id))

    def require(self, field_id: str) -> Field:
        field = self.get(field_id)
        if field is None:
            raise InvalidReference(f"Field {field_id} does not belong to table {self.table_id}")
        return field
# File: gridbase/models/custom_fields.py | Version: 1.0 | Path: gridbase/models/custom_fields.py
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from typing import List as TList
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gridbase.db.base_class import Base
from gridbase.models.core_entities import gen_uuid, utcnow

if TYPE_CHECKING:
    from gridbase.models.core_entities import DataTable, Record
    from gridbase.models.view import ViewFilter, ViewSort


class Field(Base):
    __tablename__ = "field"
    __table_args__ = (UniqueConstraint("table_id", "name", name="uq_table_field_name"),)

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    table_id: Mapped[str] = mapped_column(ForeignKey("data_table.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_type: Mapped[str] = mapped_column(String(20), nullable=False)  # 'text' | 'number'
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    table: Mapped["DataTable"] = relationship(back_populates="fields")
    cells: Mapped[TList["CellValue"]] = relationship(back_populates="field", cascade="all, delete-orphan")
    filters: Mapped[TList["ViewFilter"]] = relationship(back_populates="field", cascade="all, delete-orphan")
    sorts: Mapped[TList["ViewSort"]] = relationship(back_populates="field", cascade="all, delete-orphan")


class CellValue(Base):
    """
    One stored fact per (record, field).

    ``value_type`` is the tag of the cell's Value. ``text_value`` holds the
    textualized value and ``number_value`` its numeric coercion (NULL when the
    text does not parse); both are NULL for an explicit Null. Filters and sorts
    read these two columns; ``folded_value`` is the casefolded text that
    ``contains`` matches against.
    """

    __tablename__ = "cell_value"
    __table_args__ = (UniqueConstraint("record_id", "field_id", name="uq_cell_record_field"),)

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    record_id: Mapped[str] = mapped_column(ForeignKey("record.id"), index=True, nullable=False)
    field_id: Mapped[str] = mapped_column(ForeignKey("field.id"), index=True, nullable=False)
    value_type: Mapped[str] = mapped_column(String(10), nullable=False, default="null")
    text_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    number_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    folded_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    record: Mapped["Record"] = relationship(back_populates="cells")
    field: Mapped["Field"] = relationship(back_populates="cells")

# File: /gridbase/models/view.py | Version: 1.0 | Title: SQLAlchemy models for Saved Views (+ filter/sort clauses)
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any
from typing import List as TList
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gridbase.db.base_class import Base
from gridbase.models.core_entities import gen_uuid, utcnow

if TYPE_CHECKING:
    from gridbase.models.core_entities import DataTable
    from gridbase.models.custom_fields import Field


class View(Base):
    __tablename__ = "views"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    table_id: Mapped[str] = mapped_column(ForeignKey("data_table.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")
    hidden_field_ids: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    table: Mapped["DataTable"] = relationship(back_populates="views")
    filters: Mapped[TList["ViewFilter"]] = relationship(
        back_populates="view",
        cascade="all, delete-orphan",
        order_by="ViewFilter.position",
    )
    sorts: Mapped[TList["ViewSort"]] = relationship(
        back_populates="view",
        cascade="all, delete-orphan",
        order_by="ViewSort.order",
    )

    __table_args__ = (Index("ix_views_table", "table_id", "is_default"),)


class ViewFilter(Base):
    __tablename__ = "view_filter"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    view_id: Mapped[str] = mapped_column(ForeignKey("views.id"), index=True, nullable=False)
    field_id: Mapped[str] = mapped_column(ForeignKey("field.id"), index=True, nullable=False)
    operator: Mapped[str] = mapped_column(String(20), nullable=False)
    value: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    view: Mapped["View"] = relationship(back_populates="filters")
    field: Mapped["Field"] = relationship(back_populates="filters")


class ViewSort(Base):
    __tablename__ = "view_sort"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    view_id: Mapped[str] = mapped_column(ForeignKey("views.id"), index=True, nullable=False)
    field_id: Mapped[str] = mapped_column(ForeignKey("field.id"), index=True, nullable=False)
    direction: Mapped[str] = mapped_column(String(4), nullable=False, default="asc")
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    view: Mapped["View"] = relationship(back_populates="sorts")
    field: Mapped["Field"] = relationship(back_populates="sorts")

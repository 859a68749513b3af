# File: /gridbase/models/core_entities.py | Version: 1.0 | Path: /gridbase/models/core_entities.py
from __future__ import annotations

from datetime import UTC, datetime
from typing import List as TList
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gridbase.db.base_class import Base


def gen_uuid() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    __tablename__ = "user"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    tables: Mapped[TList["DataTable"]] = relationship(back_populates="owner", cascade="all, delete-orphan")


class DataTable(Base):
    __tablename__ = "data_table"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    owner_id: Mapped[str] = mapped_column(ForeignKey("user.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    owner: Mapped["User"] = relationship(back_populates="tables")
    fields: Mapped[TList["Field"]] = relationship(
        back_populates="table", cascade="all, delete-orphan", order_by="Field.order"
    )
    records: Mapped[TList["Record"]] = relationship(back_populates="table", cascade="all, delete-orphan")
    views: Mapped[TList["View"]] = relationship(back_populates="table", cascade="all, delete-orphan")


class Record(Base):
    __tablename__ = "record"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    table_id: Mapped[str] = mapped_column(ForeignKey("data_table.id"), index=True, nullable=False)
    # Strictly increasing per table; assigned by crud.records, not by the column default
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    table: Mapped["DataTable"] = relationship(back_populates="records")
    cells: Mapped[TList["CellValue"]] = relationship(back_populates="record", cascade="all, delete-orphan")


# Keyset pagination walks (table_id, created_at, id)
Index("ix_record_table_created_id", Record.table_id, Record.created_at, Record.id)

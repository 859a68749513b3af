# File: /tests/test_view_store.py | Version: 1.0 | Title: View store (default-flag repair, first view, validation order)
from __future__ import annotations

import pytest

from gridbase.core.exceptions import InvalidReference, LastViewDeletion
from gridbase.crud import records as crud_records
from gridbase.crud import tables as crud_tables
from gridbase.crud import view as crud_view
from gridbase.models import View
from gridbase.query.executor import list_page
from gridbase.schemas.filters import FilterIn, SortIn
from gridbase.schemas.view import ViewCreate, ViewUpdate


def _defaults(db, table_id):
    return [v.id for v in crud_view.list_views(db, table_id) if v.is_default]


def test_first_view_of_a_bare_table_becomes_default(db_session, owner):
    table = crud_tables.create_table(db_session, owner_id=owner.id, name="T")
    for v in crud_view.list_views(db_session, table.id):
        db_session.delete(v)
    db_session.commit()

    view = crud_view.create_view(db_session, table_id=table.id, data=ViewCreate(name="Only"))
    assert view.is_default is True


def test_ensure_default_repairs_missing_and_duplicate_flags(db_session, owner):
    table = crud_tables.create_table(db_session, owner_id=owner.id, name="T")
    second = crud_view.create_view(db_session, table_id=table.id, data=ViewCreate(name="Second"))

    for v in crud_view.list_views(db_session, table.id):
        v.is_default = False
    db_session.commit()
    assert crud_view.ensure_default(db_session, table.id).id == second.id
    assert _defaults(db_session, table.id) == [second.id]

    for v in crud_view.list_views(db_session, table.id):
        v.is_default = True
    db_session.commit()
    crud_view.ensure_default(db_session, table.id)
    assert len(_defaults(db_session, table.id)) == 1


def test_delete_default_promotes_newest_remaining(db_session, owner):
    table = crud_tables.create_table(db_session, owner_id=owner.id, name="T")
    grid = crud_view.get_default_view(db_session, table.id)
    older = crud_view.create_view(db_session, table_id=table.id, data=ViewCreate(name="Older"))
    newer = crud_view.create_view(db_session, table_id=table.id, data=ViewCreate(name="Newer"))

    promoted = crud_view.delete_view(db_session, grid)
    assert promoted.id == newer.id
    assert _defaults(db_session, table.id) == [newer.id]

    crud_view.delete_view(db_session, newer)
    with pytest.raises(LastViewDeletion):
        crud_view.delete_view(db_session, older)
    assert _defaults(db_session, table.id) == [older.id]


def test_failed_update_leaves_view_untouched(db_session, owner):
    table = crud_tables.create_table(db_session, owner_id=owner.id, name="T")
    field = crud_tables.add_field(db_session, table_id=table.id, name="F", field_type="text")
    view = crud_view.create_view(
        db_session,
        table_id=table.id,
        data=ViewCreate(name="V", filters=[FilterIn(field_id=field.id, operator="isEmpty")]),
    )

    with pytest.raises(InvalidReference):
        crud_view.update_view(
            db_session, view, ViewUpdate(name="Renamed", hidden_field_ids=["missing"])
        )
    db_session.expire_all()
    fresh = db_session.get(View, view.id)
    assert fresh.name == "V"
    assert [f.operator for f in fresh.filters] == ["isEmpty"]


def test_add_sort_with_lower_order_takes_priority(db_session, owner):
    table = crud_tables.create_table(db_session, owner_id=owner.id, name="T")
    name = crud_tables.add_field(db_session, table_id=table.id, name="Name", field_type="text")
    age = crud_tables.add_field(db_session, table_id=table.id, name="Age", field_type="number")
    rec = {}
    for label, years in (("b", 2), ("a", 2), ("c", 1)):
        rec[label] = crud_records.create_record(
            db_session, table_id=table.id, cells={name.id: label, age.id: years}
        ).id
    view = crud_view.create_view(db_session, table_id=table.id, data=ViewCreate(name="V"))

    by_name = crud_view.add_sort(db_session, view, SortIn(field_id=name.id, order=5))
    by_age = crud_view.add_sort(db_session, view, SortIn(field_id=age.id, order=2))
    assert [s.id for s in crud_view.list_sorts(db_session, view)] == [by_age.id, by_name.id]

    page = list_page(db_session, table.id, view_id=view.id)
    assert [r["id"] for r in page.rows] == [rec["c"], rec["a"], rec["b"]]

    # no explicit order appends after the highest
    appended = crud_view.add_sort(db_session, view, SortIn(field_id=name.id, direction="desc"))
    assert appended.order == 6

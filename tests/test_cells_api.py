# File: /tests/test_cells_api.py | Version: 1.0 | Title: Cell upsert API (idempotence, references, coercion)
from __future__ import annotations

from typing import Dict

from sqlalchemy import func, select

from gridbase.models import CellValue


def _login_headers(client, email: str) -> Dict[str, str]:
    client.post("/auth/register", data={"email": email, "password": "p"})
    r = client.post("/auth/token", data={"username": email, "password": "p"})
    token = r.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def _setup(client, headers):
    tid = client.post("/tables", json={"name": "Cells"}, headers=headers).json()["id"]
    fid = client.post(
        f"/tables/{tid}/fields", json={"name": "Qty", "type": "number"}, headers=headers
    ).json()["id"]
    rid = client.post(f"/tables/{tid}/records", json={}, headers=headers).json()["id"]
    return tid, fid, rid


def test_upsert_is_idempotent(client, db_session):
    headers = _login_headers(client, "cells@example.com")
    _, fid, rid = _setup(client, headers)

    for _ in range(2):
        r = client.put(f"/records/{rid}/cells/{fid}", json={"value": 12}, headers=headers)
        assert r.status_code == 200, r.text
        assert r.json() == {"record_id": rid, "field_id": fid, "value_type": "number", "value": 12}

    count = db_session.execute(
        select(func.count(CellValue.id)).where(CellValue.record_id == rid, CellValue.field_id == fid)
    ).scalar()
    assert count == 1


def test_upsert_overwrites_and_coerces(client):
    headers = _login_headers(client, "cells-coerce@example.com")
    tid, fid, rid = _setup(client, headers)

    r = client.put(f"/records/{rid}/cells/{fid}", json={"value": "7"}, headers=headers)
    assert r.json()["value_type"] == "text"
    assert r.json()["value"] == "7"

    # anything that is not text or a number is stored as Null
    r = client.put(f"/records/{rid}/cells/{fid}", json={"value": True}, headers=headers)
    assert r.json()["value_type"] == "null"
    assert r.json()["value"] is None

    r = client.put(f"/records/{rid}/cells/{fid}", json={"value": {"a": 1}}, headers=headers)
    assert r.json()["value_type"] == "null"

    page = client.post(f"/tables/{tid}/records/query", json={}, headers=headers).json()
    assert page["rows"] == [{"id": rid, fid: None}]


def test_upsert_unknown_record_or_field(client):
    headers = _login_headers(client, "cells-404@example.com")
    _, fid, rid = _setup(client, headers)

    r = client.put(f"/records/nope/cells/{fid}", json={"value": 1}, headers=headers)
    assert r.status_code == 404
    r = client.put(f"/records/{rid}/cells/nope", json={"value": 1}, headers=headers)
    assert r.status_code == 404
    assert r.json()["code"] == "NOT_FOUND"


def test_upsert_field_from_other_table(client):
    headers = _login_headers(client, "cells-ref@example.com")
    _, _, rid = _setup(client, headers)
    _, other_fid, _ = _setup(client, headers)

    r = client.put(f"/records/{rid}/cells/{other_fid}", json={"value": 1}, headers=headers)
    assert r.status_code == 400
    assert r.json()["code"] == "INVALID_REFERENCE"

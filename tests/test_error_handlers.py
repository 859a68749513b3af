# File: /tests/test_error_handlers.py | Version: 1.0 | Title: Domain + standardized error envelopes
from __future__ import annotations

import json
import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from gridbase.core import logging as app_logging
from gridbase.core.config import settings
from gridbase.core.error_handlers import register_domain_handlers, register_exception_handlers
from gridbase.core.exceptions import BulkInsertError, LastViewDeletion


def _app() -> FastAPI:
    app = FastAPI()
    register_domain_handlers(app)
    register_exception_handlers(app)

    @app.get("/last-view")
    def _last_view():
        raise LastViewDeletion("A table must keep at least one view")

    @app.get("/bulk")
    def _bulk():
        raise BulkInsertError("batch failed", committed=1000)

    @app.get("/boom")
    def _boom():
        raise RuntimeError("secret internals")

    @app.get("/typed/{n}")
    def _typed(n: int):
        return {"n": n}

    return app


def test_domain_errors_use_detail_and_code(monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_STD_ERRORS", False)
    c = TestClient(_app())
    r = c.get("/last-view")
    assert r.status_code == 400
    assert r.json() == {"detail": "A table must keep at least one view", "code": "LAST_VIEW_DELETION"}

    r = c.get("/bulk")
    assert r.status_code == 500
    assert r.json()["committed"] == 1000


def test_standardized_envelope(monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_STD_ERRORS", True)
    c = TestClient(_app(), raise_server_exceptions=False)

    r = c.get("/last-view")
    assert r.json() == {
        "error": {"code": "LAST_VIEW_DELETION", "message": "A table must keep at least one view"}
    }

    r = c.get("/typed/abc")
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "UNPROCESSABLE_ENTITY"

    r = c.get("/nowhere")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"

    r = c.get("/boom")
    assert r.status_code == 500
    assert "secret" not in r.text


def test_json_log_lines(monkeypatch):
    monkeypatch.setenv("LOG_JSON", "1")
    app_logging.configure_logging()
    try:
        formatter = next(
            h.formatter
            for h in logging.getLogger().handlers
            if isinstance(h.formatter, app_logging.JsonConsole)
        )
        record = logging.LogRecord("gridbase.test", logging.INFO, __file__, 1, "hello %s", ("grid",), None)
        assert json.loads(formatter.format(record)) == {
            "level": "INFO",
            "logger": "gridbase.test",
            "message": "hello grid",
        }
    finally:
        monkeypatch.delenv("LOG_JSON")
        app_logging.configure_logging()

from __future__ import annotations
import json
import logging

from app import create_app
from blueprints.core.routes import JSONFormatter

def test_health_ok():
    app = create_app("test")
    with app.test_client() as c:
        rv = c.get("/health")
        assert rv.status_code == 200
        data = rv.get_json()
        assert data["status"] == "ok"
        assert data["ts"].endswith("Z")

def test_csrf_token_issued():
    app = create_app("test")
    with app.test_client() as c:
        rv = c.get("/api/v1/csrf")
        assert rv.status_code == 200
        assert rv.get_json()["csrf"]
        assert any(c.startswith("csrf_token=") for c in rv.headers.getlist("Set-Cookie"))

def test_json_formatter_carries_request_fields():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "request handled", None, None)
    record.event = "http_request"
    record.status = 200
    payload = json.loads(JSONFormatter().format(record))
    assert payload["msg"] == "request handled"
    assert payload["level"] == "INFO"
    assert payload["event"] == "http_request"
    assert payload["status"] == 200

"""Tests for JSON log formatting and request correlation."""

from __future__ import annotations

import json
import logging

from authcore.core.logger import JSONFormatter


def _record(**extra):
    record = logging.LogRecord(
        name="authcore.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="refresh.%s",
        args=("rotated",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_renders_known_extras():
    payload = json.loads(
        JSONFormatter().format(_record(user_id="u1", jti="j2", replaces="j1", secret="nope"))
    )

    assert payload["level"] == "INFO"
    assert payload["message"] == "refresh.rotated"
    assert payload["user_id"] == "u1"
    assert payload["jti"] == "j2"
    assert payload["replaces"] == "j1"
    assert "secret" not in payload
    assert payload["request_id"] is None


def test_request_id_header_is_echoed(client):
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client):
    resp = client.get("/api/v1/health")
    assert resp.headers.get("X-Request-ID")

"""Tests for skillscan.observability: JSON logging and request middleware."""

from __future__ import annotations

import json
import logging
import sys

from fastapi import FastAPI
from fastapi.testclient import TestClient

from skillscan.observability import JsonFormatter, add_observability_middleware, setup_logging


def _record(msg="hello", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="test", level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=exc_info,
    )


class TestJsonFormatter:
    def test_format_basic_record(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "hello"
        assert parsed["logger"] == "test"
        assert "timestamp" in parsed

    def test_format_propagates_extra_fields(self):
        record = _record()
        record.scanner = "semgrep"
        record.skill = "pdf-filler"
        record.duration_ms = 12
        parsed = json.loads(JsonFormatter().format(record))
        assert parsed["scanner"] == "semgrep"
        assert parsed["skill"] == "pdf-filler"
        assert parsed["duration_ms"] == 12

    def test_format_excludes_missing_extra_fields(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert "scanner" not in parsed
        assert "status_code" not in parsed

    def test_format_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record("failed", logging.ERROR, sys.exc_info())
        parsed = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in parsed["exception"]


class TestSetupLogging:
    def test_installs_json_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("debug")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_unknown_level_falls_back(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("chatty")
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestMiddleware:
    def test_access_log(self, caplog):
        app = FastAPI()
        add_observability_middleware(app)

        @app.get("/ping")
        def ping():
            return {"ok": True}

        with caplog.at_level(logging.INFO, logger="skillscan.access"):
            resp = TestClient(app).get("/ping")
        assert resp.status_code == 200
        record = next(r for r in caplog.records if r.name == "skillscan.access")
        assert record.method == "GET"
        assert record.path == "/ping"
        assert record.status_code == 200

"""
Tests for employee_portal/core/logging_config.py
"""
import json
import logging
import sys

import pytest


def _record(msg="hello", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord("employee_portal.test", level, __file__, 10, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_outputs_one_json_object(self):
        from employee_portal.core.logging_config import JSONFormatter

        line = JSONFormatter().format(_record())
        data = json.loads(line)

        assert "\n" not in line
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["service"] == "employee-portal"
        assert data["request_id"] is None
        assert "extra" not in data

    def test_request_id_is_top_level_not_extra(self):
        from employee_portal.core.logging_config import JSONFormatter

        data = json.loads(JSONFormatter().format(_record(request_id="abc123", status=201)))

        assert data["request_id"] == "abc123"
        assert data["extra"] == {"status": 201}

    def test_includes_exception(self):
        from employee_portal.core.logging_config import JSONFormatter

        try:
            raise ValueError("bad salary")
        except ValueError:
            record = _record("failed", level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert data["error"]["type"] == "ValueError"
        assert data["error"]["detail"] == "bad salary"
        assert "Traceback" in data["error"]["stack"]


class TestColoredFormatter:

    def test_contains_level_logger_and_message(self):
        from employee_portal.core.logging_config import ColoredFormatter

        line = ColoredFormatter().format(_record())

        assert "INFO" in line
        assert "employee_portal.test" in line
        assert line.endswith("hello")

    def test_shows_request_id_when_present(self):
        from employee_portal.core.logging_config import ColoredFormatter

        line = ColoredFormatter().format(_record(request_id="req-42"))

        assert "[req-42] hello" in line


class TestRequestIdFilter:

    def test_stamps_current_request_id(self):
        from employee_portal.core.logging_config import RequestIdFilter, request_id_var

        token = request_id_var.set("ctx-1")
        try:
            record = _record()
            assert RequestIdFilter().filter(record) is True
        finally:
            request_id_var.reset(token)

        assert record.request_id == "ctx-1"

    def test_outside_a_request_stamps_none(self):
        from employee_portal.core.logging_config import RequestIdFilter

        record = _record()
        RequestIdFilter().filter(record)

        assert record.request_id is None

    def test_request_ids_are_unique(self):
        from employee_portal.core.logging_config import generate_request_id

        ids = {generate_request_id() for _ in range(50)}

        assert len(ids) == 50
        assert all(len(i) == 12 for i in ids)


class TestSetupLogging:

    @pytest.fixture(autouse=True)
    def isolated_root_logger(self, monkeypatch):
        root = logging.getLogger()
        level = root.level
        monkeypatch.setattr(root, "handlers", [])
        yield
        root.setLevel(level)

    def test_json_handler_installed(self):
        from employee_portal.core.logging_config import JSONFormatter, setup_logging

        setup_logging(log_level="warning", json_logs=True)

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_unknown_level_rejected(self):
        from employee_portal.core.logging_config import setup_logging

        with pytest.raises(ValueError):
            setup_logging(log_level="chatty")

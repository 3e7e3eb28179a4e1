"""Tests for structured logging helpers."""

import json
import logging

import pytest

from DocsIndex.Implementors.logging import JSONFormatter, StructuredLogger, get_logger, log_event


class TestJSONFormatter:
    def test_includes_extra_fields(self):
        record = logging.makeLogRecord(
            {"msg": "delivered", "levelname": "INFO", "name": "x", "extra_fields": {"groups": 2}}
        )
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "delivered"
        assert payload["groups"] == 2
        assert payload["timestamp"].endswith("Z")


class TestGetLogger:
    def test_single_managed_handler(self):
        get_logger("DocsIndex", "INFO")
        adapter = get_logger("DocsIndex", "DEBUG", fmt="json")
        managed = [h for h in adapter.logger.handlers if getattr(h, "_docsindex_managed", False)]
        assert len(managed) == 1
        assert isinstance(managed[0].formatter, JSONFormatter)
        assert adapter.logger.level == logging.DEBUG

    def test_bind_returns_new_adapter(self, caplog):
        base = StructuredLogger(logging.getLogger("DocsIndex.test"), {"trait": "t::T"})
        bound = base.bind(command="load", skipped=None)
        assert base.context == {"trait": "t::T"}
        assert bound.context == {"trait": "t::T", "command": "load"}
        with caplog.at_level(logging.INFO, logger="DocsIndex.test"):
            log_event(bound, "info", "hello", groups=1, command="check")
        assert caplog.records[-1].extra_fields == {"trait": "t::T", "command": "check", "groups": 1}


class TestLogEvent:
    def test_attaches_fields(self, caplog):
        logger = logging.getLogger("DocsIndex.events")
        with caplog.at_level(logging.INFO, logger="DocsIndex.events"):
            log_event(logger, "info", "parked", outcome="pending")
        assert caplog.records[-1].extra_fields == {"outcome": "pending"}

    def test_unknown_level(self):
        with pytest.raises(AttributeError):
            log_event(logging.getLogger("DocsIndex.events"), "loud", "nope")

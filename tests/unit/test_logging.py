"""Tests for structured logging and log context."""

import json
import logging

from linear_node.observability.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    clear_log_context,
    configure_logging,
    set_log_context,
)


def _record(message="hello"):
    return logging.LogRecord("linear_node.test", logging.INFO, __file__, 1, message, None, None)


class TestStructuredFormatter:
    def teardown_method(self):
        clear_log_context()

    def test_json_output_with_context(self):
        set_log_context(resource="issues", operation="getIssue", item_index=0)

        entry = json.loads(StructuredFormatter().format(_record()))

        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "linear_node.test"
        assert entry["resource"] == "issues"
        assert entry["operation"] == "getIssue"
        assert entry["item_index"] == 0

    def test_cleared_context_omitted(self):
        set_log_context(webhook_id="wh1")
        clear_log_context()

        entry = json.loads(StructuredFormatter().format(_record()))

        assert "webhook_id" not in entry
        assert "resource" not in entry


class TestHumanReadableFormatter:
    def teardown_method(self):
        clear_log_context()

    def test_context_suffix(self):
        set_log_context(resource="teams", webhook_id="wh1")

        line = HumanReadableFormatter().format(_record("done"))

        assert "done" in line
        assert "[resource=teams, webhook_id=wh1]" in line


class TestConfigureLogging:
    def setup_method(self):
        self._handlers = logging.getLogger().handlers[:]
        self._level = logging.getLogger().level

    def teardown_method(self):
        root = logging.getLogger()
        root.handlers[:] = self._handlers
        root.setLevel(self._level)

    def test_production_uses_json(self):
        configure_logging(environment="production", log_level="WARNING")

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_development_is_human_readable(self):
        configure_logging(environment="development", log_level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, HumanReadableFormatter)

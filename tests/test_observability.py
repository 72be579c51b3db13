"""Tests for structured logging."""

import io
import json
import logging

from propcheck import arbitrary as arb
from propcheck.core.property import for_all
from propcheck.observability import (
    HumanReadableFormatter,
    StructuredFormatter,
    configure_logging,
    get_context,
    log_context,
)
from propcheck.runner import check


def make_record(message: str = "hello", **structured) -> logging.LogRecord:
    record = logging.LogRecord("propcheck.test", logging.INFO, __file__, 1, message, None, None)
    if structured:
        record.structured_data = structured
    return record


class TestStructuredFormatter:
    def test_basic_fields(self):
        data = json.loads(StructuredFormatter().format(make_record()))
        assert data["message"] == "hello"
        assert data["level"] == "info"
        assert data["logger"] == "propcheck.test"
        assert "timestamp" in data

    def test_structured_data_and_context(self):
        with log_context(property="p", seed=3):
            data = json.loads(StructuredFormatter().format(make_record(tests_run=5)))
        assert data["data"] == {"tests_run": 5}
        assert data["context"] == {"property": "p", "seed": 3}

    def test_optional_fields(self):
        formatter = StructuredFormatter(include_location=True, extra_fields={"app": "ci", "message": "ignored"})
        data = json.loads(formatter.format(make_record()))
        assert data["location"]["line"] == 1
        assert data["app"] == "ci"
        assert data["message"] == "hello"


class TestHumanReadableFormatter:
    def test_plain_output(self):
        line = HumanReadableFormatter(use_colors=False).format(make_record(steps=2))
        assert "INFO" in line
        assert "[propcheck.test] hello" in line
        assert 'data={"steps": 2}' in line
        assert "\033[" not in line

    def test_context_fields(self):
        with log_context(property="p", seed=3):
            line = HumanReadableFormatter(use_colors=False).format(make_record())
        assert line.endswith("hello | property=p seed=3")


class TestLogContext:
    def test_nesting_and_reset(self):
        with log_context(a=1):
            with log_context(b=2):
                assert get_context() == {"a": 1, "b": 2}
            assert get_context() == {"a": 1}
        assert get_context() == {}


class TestConfigureLogging:
    def test_replaces_handlers(self):
        configure_logging(level="INFO")
        logger = configure_logging(level="DEBUG")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_driver_emits_json_records(self):
        stream = io.StringIO()
        configure_logging(level="INFO", json_format=True, stream=stream)
        check(for_all(arb.integers(), body=lambda n: True, name="reflexive"), seed=42, max_tests=5)
        records = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert records
        assert all(r["context"] == {"property": "reflexive", "seed": 42} for r in records)
        final = records[-1]
        assert final["message"] == "reflexive: passed"
        assert final["data"]["tests_run"] == 5

    def test_debug_records_shrink_steps(self):
        stream = io.StringIO()
        configure_logging(level="DEBUG", json_format=True, stream=stream)
        check(for_all(arb.integers(), body=lambda n: n < 10), seed=1)
        messages = [json.loads(line)["message"] for line in stream.getvalue().splitlines()]
        assert "Property falsified, shrinking" in messages
        assert "Shrink search finished" in messages

"""Unit tests for structured logging."""

import contextvars
import json
import logging
import sys

import pytest

from dns_target_webhook.observability.logging import (
    CorrelationIDFilter,
    HealthProbeFilter,
    StructuredFormatter,
    set_correlation_id,
    setup_structured_logging,
)


def make_record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="dns_target_webhook.webhooks.handler",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """JSON output of log records."""

    def test_admission_fields_included(self):
        record = make_record(
            "Admission review for Ingress default/web",
            kind="Ingress",
            resource_name="web",
            namespace="default",
            operation="CREATE",
            uid="abc",
            correlation_id="abc",
        )

        data = json.loads(StructuredFormatter().format(record))

        assert data["message"] == "Admission review for Ingress default/web"
        assert data["level"] == "INFO"
        assert data["kind"] == "Ingress"
        assert data["resource_name"] == "web"
        assert data["namespace"] == "default"
        assert data["operation"] == "CREATE"
        assert data["uid"] == "abc"
        assert data["correlation_id"] == "abc"

    def test_unknown_fields_ignored(self):
        data = json.loads(StructuredFormatter().format(make_record("hi", other="x")))

        assert "other" not in data

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record("failed")
            record.exc_info = sys.exc_info()

        data = json.loads(StructuredFormatter().format(record))

        assert "ValueError: boom" in data["exception"]


class TestFilters:
    """Correlation ID and health probe filters."""

    def test_correlation_id_from_context(self):
        set_correlation_id("uid-1234")
        record = make_record("hello")

        assert CorrelationIDFilter().filter(record) is True
        assert record.correlation_id == "uid-1234"

    def test_correlation_id_outside_review(self):
        record = make_record("startup")

        contextvars.Context().run(CorrelationIDFilter().filter, record)

        assert record.correlation_id == "-"

    @pytest.mark.parametrize("message", ["GET /healthz 200", "GET /metrics 200"])
    def test_probe_logs_suppressed(self, message):
        assert HealthProbeFilter().filter(make_record(message)) is False

    def test_probe_logs_kept_when_enabled(self):
        record = make_record("GET /healthz 200")
        assert HealthProbeFilter(suppress_health_logs=False).filter(record) is True

    def test_webhook_logs_kept(self):
        assert HealthProbeFilter().filter(make_record("POST /webhook 200")) is True


def test_setup_structured_logging_installs_single_handler():
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    try:
        setup_structured_logging(log_level="DEBUG")

        assert len(root_logger.handlers) == 1
        handler = root_logger.handlers[0]
        assert isinstance(handler.formatter, StructuredFormatter)
        assert root_logger.level == logging.DEBUG
        assert logging.getLogger("aiohttp.access").level == logging.WARNING
        assert any(
            isinstance(f, HealthProbeFilter) and f.suppress_health_logs
            for f in handler.filters
        )
    finally:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)

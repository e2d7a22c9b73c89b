"""Tests for structured logging and correlation IDs."""

import json
import re

from sample_discovery.observability.logging import (
    ConsoleFormatter,
    CorrelationContext,
    CorrelationIDProcessor,
    JSONFormatter,
    LogFormat,
    LogLevel,
    ServiceContextProcessor,
    build_processors,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
    setup_logging,
)
from sample_discovery.observability.logging.correlation import clear_correlation_id


class TestCorrelation:
    """Test correlation ID handling."""

    def test_generated_format(self):
        """Test request IDs carry a millisecond timestamp and random suffix."""
        assert re.fullmatch(r"req_\d+_[0-9a-f]{9}", generate_correlation_id())

    def test_context_restores_previous(self):
        """Test nested contexts restore the outer ID."""
        set_correlation_id("outer")

        with CorrelationContext("inner") as context:
            assert get_correlation_id() == "inner"
            assert context.correlation_id == "inner"

        assert get_correlation_id() == "outer"
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_processor_adds_id(self):
        """Test the processor injects the current ID."""
        processor = CorrelationIDProcessor()

        with CorrelationContext("req_1_abc"):
            event = processor(None, "info", {"event": "hello"})

        assert event["request_id"] == "req_1_abc"
        assert "request_id" not in processor(None, "info", {"event": "hello"})


class TestFormatters:
    """Test log formatters."""

    def test_json_formatter(self):
        """Test JSON output."""
        output = JSONFormatter()(None, "warning", {"event": "failed", "attempt": 2})

        data = json.loads(output)
        assert data["event"] == "failed"
        assert data["level"] == "WARNING"
        assert data["attempt"] == 2
        assert "timestamp" in data

    def test_console_formatter(self):
        """Test console output without colors."""
        output = ConsoleFormatter(colors=False)(
            None,
            "info",
            {"event": "served", "request_id": "req_1", "source": "cache"},
        )

        assert output == "INFO [req_1] served source=cache"


class TestSetupLogging:
    """Test logging setup."""

    def test_setup_json(self, tmp_path):
        """Test configuring JSON logging to a file."""
        setup_logging(
            level=LogLevel.DEBUG,
            format_type=LogFormat.JSON,
            log_file=str(tmp_path / "app.log"),
        )

    def test_setup_console(self):
        """Test configuring console logging."""
        setup_logging(level=LogLevel.WARNING, format_type=LogFormat.CONSOLE)


class TestProcessors:
    """Test the processor chain."""

    def test_service_context(self):
        """Test service and environment are stamped without overriding."""
        processor = ServiceContextProcessor("Sample Discovery", "testing")

        event = processor(None, "info", {"event": "hello", "service": "custom"})

        assert event["service"] == "custom"
        assert event["environment"] == "testing"

    def test_chain_ends_with_renderer(self):
        """Test the renderer matches the requested format."""
        console = build_processors(LogFormat.CONSOLE, service="svc")
        json_chain = build_processors(LogFormat.JSON, enable_correlation=False)

        assert isinstance(console[-1], ConsoleFormatter)
        assert any(isinstance(p, ServiceContextProcessor) for p in console)
        assert isinstance(json_chain[-1], JSONFormatter)
        assert not any(isinstance(p, CorrelationIDProcessor) for p in json_chain)

"""Tests for logging setup."""

import json
import logging

import pytest

from az_metrics_monitor.config.settings import LoggingConfig
from az_metrics_monitor.utils.logging import (
    JSONFormatter,
    ServiceContextFilter,
    TextFormatter,
    log_error_with_context,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(message="Published 3 metrics", **extra):
    record = logging.LogRecord(
        name="az_metrics_monitor.poller",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    """Test JSON and text formatters."""

    def test_json_includes_context_fields(self):
        record = _record(ctx_resource_id="web-asg", service="az-metrics-monitor")

        payload = json.loads(JSONFormatter().format(record))

        assert payload['message'] == "Published 3 metrics"
        assert payload['level'] == "INFO"
        assert payload['logger'] == "az_metrics_monitor.poller"
        assert payload['ctx_resource_id'] == "web-asg"
        assert payload['service'] == "az-metrics-monitor"
        assert payload['timestamp'].endswith("Z")

    def test_text_format(self):
        line = TextFormatter(use_colors=False).format(_record())

        assert "[INFO] az_metrics_monitor.poller: Published 3 metrics" in line

    def test_text_format_appends_context(self):
        line = TextFormatter().format(_record(ctx_resource_id="web-asg", ctx_batch_index=1))

        assert line.endswith("Published 3 metrics (resource_id=web-asg, batch_index=1)")
        assert "\033[" not in line

    def test_service_filter(self):
        record = _record()

        assert ServiceContextFilter("monitor-a").filter(record) is True
        assert record.service == "monitor-a"


class TestSetupLogging:
    """Test setup_logging."""

    def test_json_to_stdout(self, restore_root_logger):
        setup_logging(LoggingConfig(level="DEBUG", format="json"), "monitor-a")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger('botocore').level == logging.WARNING

    def test_text_to_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "monitor.log"

        setup_logging(LoggingConfig(format="text", output=str(log_file)))

        handler = restore_root_logger.handlers[0]
        assert isinstance(handler, logging.FileHandler)
        assert isinstance(handler.formatter, TextFormatter)
        handler.close()

    def test_error_with_context(self, caplog):
        logger = logging.getLogger("az_metrics_monitor.test")

        with caplog.at_level(logging.ERROR, logger="az_metrics_monitor.test"):
            log_error_with_context(logger, RuntimeError("boom"), "send metrics", resource_id="web-asg")

        record = caplog.records[0]
        assert record.getMessage() == "Error in send metrics: boom"
        assert record.ctx_error_type == "RuntimeError"
        assert record.ctx_resource_id == "web-asg"

"""Tests for the structured logging utilities."""

import logging
import time
from unittest.mock import MagicMock, patch

from sheet_interchange.config import Settings
from sheet_interchange.utils.logging import (
    LogContext,
    PerformanceMetrics,
    StructuredLogFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_extra_context,
    get_format,
    get_logger,
    get_source,
    set_extra_context,
    set_format,
    set_source,
    timed_operation,
)


class TestContextVariables:
    """Tests for context variable management."""

    def setup_method(self) -> None:
        """Clear context before each test."""
        clear_context()

    def teardown_method(self) -> None:
        """Clear context after each test."""
        clear_context()

    def test_source_default_none(self) -> None:
        assert get_source() is None

    def test_set_and_get_source(self) -> None:
        set_source("orders.csv")
        assert get_source() == "orders.csv"

    def test_clear_source(self) -> None:
        set_source("orders.csv")
        set_source(None)
        assert get_source() is None

    def test_set_and_get_format(self) -> None:
        set_format("tsv")
        assert get_format() == "tsv"

    def test_extra_context_default_empty(self) -> None:
        """Extra context should default to empty dict."""
        assert get_extra_context() == {}

    def test_clear_context(self) -> None:
        """Clear context should reset all context variables."""
        set_source("orders.csv")
        set_format("csv")
        set_extra_context({"key": "value"})

        clear_context()

        assert get_source() is None
        assert get_format() is None
        assert get_extra_context() == {}


class TestPerformanceMetrics:
    """Tests for PerformanceMetrics class."""

    def test_initialization(self) -> None:
        metrics = PerformanceMetrics(operation="csv_parse")
        assert metrics.operation == "csv_parse"
        assert metrics.duration_seconds == 0.0
        assert metrics.bytes_processed == 0
        assert metrics.rows_processed == 0
        assert metrics.sheets_processed == 0
        assert metrics.custom_metrics == {}

    def test_finish_calculates_duration(self) -> None:
        """Finish should calculate duration."""
        metrics = PerformanceMetrics(operation="csv_parse")
        time.sleep(0.01)
        metrics.finish()
        assert metrics.duration_seconds > 0
        assert metrics.end_time is not None

    def test_to_dict_with_all_fields(self) -> None:
        metrics = PerformanceMetrics(operation="csv_parse")
        metrics.duration_seconds = 2.0
        metrics.bytes_processed = 2048
        metrics.rows_processed = 40
        metrics.sheets_processed = 1
        metrics.custom_metrics = {"delimiter": ","}

        result = metrics.to_dict()
        assert result["operation"] == "csv_parse"
        assert result["bytes_processed"] == 2048
        assert result["rows_processed"] == 40
        assert result["sheets_processed"] == 1
        assert result["custom_metrics"]["delimiter"] == ","

    def test_to_dict_excludes_zero_values(self) -> None:
        """to_dict should exclude zero values."""
        metrics = PerformanceMetrics(operation="csv_parse")
        metrics.duration_seconds = 1.0
        result = metrics.to_dict()
        assert "rows_processed" not in result
        assert "bytes_processed" not in result
        assert "custom_metrics" not in result


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def setup_method(self) -> None:
        self.logger = get_logger("test_logger")

    def test_get_logger_returns_structured_logger(self) -> None:
        assert isinstance(get_logger(__name__), StructuredLogger)

    def test_logger_property(self) -> None:
        assert isinstance(self.logger.logger, logging.Logger)

    def test_build_message_without_kwargs(self) -> None:
        assert self.logger._build_message("Test message") == "Test message"

    def test_build_message_with_kwargs(self) -> None:
        msg = self.logger._build_message("Loaded", rows=3, format="csv")
        assert msg == "Loaded | rows=3, format=csv"

    @patch.object(logging.Logger, "info")
    def test_info_logging(self, mock_info: MagicMock) -> None:
        """Info method should log at INFO level."""
        self.logger.info("Test info", status="ok")
        mock_info.assert_called_once()
        call_args = mock_info.call_args[0][0]
        assert "Test info" in call_args
        assert "status=ok" in call_args

    @patch.object(logging.Logger, "warning")
    def test_warning_logging(self, mock_warning: MagicMock) -> None:
        self.logger.warning("Test warning")
        mock_warning.assert_called_once()

    @patch.object(logging.Logger, "error")
    def test_error_logging(self, mock_error: MagicMock) -> None:
        self.logger.error("Test error", exc_info=False)
        mock_error.assert_called_once()

    @patch.object(logging.Logger, "exception")
    def test_exception_logging(self, mock_exception: MagicMock) -> None:
        self.logger.exception("Test exception")
        mock_exception.assert_called_once()

    @patch.object(logging.Logger, "debug")
    def test_log_performance(self, mock_debug: MagicMock) -> None:
        """log_performance should log metrics at DEBUG level."""
        metrics = PerformanceMetrics(operation="tsv_serialize")
        metrics.duration_seconds = 1.5
        metrics.rows_processed = 12
        self.logger.log_performance(metrics)
        mock_debug.assert_called_once()
        call_args = mock_debug.call_args[0][0]
        assert "Performance: tsv_serialize" in call_args
        assert "rows_processed=12" in call_args


class TestLogContext:
    """Tests for LogContext context manager."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_context_sets_values(self) -> None:
        with LogContext(source="a.csv", format="csv", sheet=2):
            assert get_source() == "a.csv"
            assert get_format() == "csv"
            assert get_extra_context() == {"sheet": 2}

    def test_context_restores_values(self) -> None:
        """LogContext should restore original values after block."""
        set_source("original.csv")
        set_extra_context({"original": "value"})

        with LogContext(source="new.csv", operation="test"):
            assert get_source() == "new.csv"

        assert get_source() == "original.csv"
        assert get_format() is None
        assert get_extra_context() == {"original": "value"}

    def test_nested_contexts(self) -> None:
        with LogContext(source="outer.csv"):
            with LogContext(source="inner.csv"):
                assert get_source() == "inner.csv"
            assert get_source() == "outer.csv"

    def test_restores_after_exception(self) -> None:
        try:
            with LogContext(source="broken.csv"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_source() is None


class TestStructuredLogFormatter:
    """Tests for StructuredLogFormatter."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def _record(self, msg: str) -> logging.LogRecord:
        return logging.LogRecord("test", logging.INFO, __file__, 1, msg, None, None)

    def test_prefixes_context(self) -> None:
        formatter = StructuredLogFormatter("%(message)s")
        with LogContext(source="people.tsv", format="tsv"):
            output = formatter.format(self._record("Loaded"))
        assert output == "[source=people.tsv format=tsv] Loaded"

    def test_no_prefix_without_context(self) -> None:
        formatter = StructuredLogFormatter("%(message)s")
        assert formatter.format(self._record("Loaded")) == "Loaded"

    def test_record_message_is_restored(self) -> None:
        formatter = StructuredLogFormatter("%(message)s")
        record = self._record("Loaded")
        with LogContext(source="x.csv"):
            formatter.format(record)
        assert record.msg == "Loaded"


class TestTimedOperation:
    """Tests for timed_operation context manager."""

    @patch.object(StructuredLogger, "log_performance")
    def test_timed_operation_logs_metrics(self, mock_log: MagicMock) -> None:
        logger = get_logger("test")
        with timed_operation(logger, "csv_parse") as metrics:
            metrics.rows_processed = 100

        mock_log.assert_called_once()
        logged_metrics = mock_log.call_args[0][0]
        assert logged_metrics.operation == "csv_parse"
        assert logged_metrics.rows_processed == 100
        assert logged_metrics.end_time is not None

    @patch.object(StructuredLogger, "log_performance")
    def test_logs_even_when_operation_fails(self, mock_log: MagicMock) -> None:
        logger = get_logger("test")
        try:
            with timed_operation(logger, "csv_parse"):
                raise ValueError("bad input")
        except ValueError:
            pass
        mock_log.assert_called_once()


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_with_string_level(self) -> None:
        configure_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_with_int_level(self) -> None:
        configure_logging(level=logging.WARNING)
        assert logging.getLogger().level == logging.WARNING

    def test_uses_structured_formatter(self) -> None:
        configure_logging(level="INFO")
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, StructuredLogFormatter)

    def test_plain_formatter(self) -> None:
        configure_logging(level="INFO", use_structured_formatter=False)
        formatter = logging.getLogger().handlers[0].formatter
        assert not isinstance(formatter, StructuredLogFormatter)

    def test_defaults_to_configured_level(self) -> None:
        configured = Settings(_env_file=None, log_level="ERROR")
        with patch("sheet_interchange.utils.logging.settings", configured):
            configure_logging()
        assert logging.getLogger().level == logging.ERROR

    def test_debug_setting_wins(self) -> None:
        configured = Settings(_env_file=None, log_level="ERROR", debug=True)
        with patch("sheet_interchange.utils.logging.settings", configured):
            configure_logging()
        assert logging.getLogger().level == logging.DEBUG

    def test_explicit_level_ignores_settings(self) -> None:
        configured = Settings(_env_file=None, debug=True)
        with patch("sheet_interchange.utils.logging.settings", configured):
            configure_logging(level="WARNING")
        assert logging.getLogger().level == logging.WARNING

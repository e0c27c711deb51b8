"""Tests for structlog setup and the capture logger."""

import logging
from unittest.mock import MagicMock

import structlog

from stylematrix.logging import CaptureLogger, get_logger, setup_logging


class TestSetupLogging:
    def test_console_disabled_by_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("STYLEMATRIX_DISABLE_CONSOLE_LOGGING", "1")

        setup_logging(level="DEBUG")

        root = logging.getLogger()
        assert all(isinstance(h, logging.NullHandler) for h in root.handlers)
        assert root.level == logging.CRITICAL

    def test_file_output(self, monkeypatch, tmp_path) -> None:
        monkeypatch.delenv("STYLEMATRIX_DISABLE_CONSOLE_LOGGING", raising=False)
        log_file = tmp_path / "logs" / "capture.log"

        setup_logging(level="INFO", log_file=log_file, console=False)

        assert log_file.parent.is_dir()
        assert any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)

    def test_get_logger(self) -> None:
        logger = get_logger("stylematrix.test")

        assert hasattr(logger, "info")


class TestCaptureLogger:
    def test_start_and_end(self) -> None:
        base = MagicMock(spec=structlog.stdlib.BoundLogger)
        capture_logger = CaptureLogger(base)

        context = capture_logger.log_capture_start("capture_current_state", ".btn", extra=1)
        capture_logger.log_capture_end(context, ok=True, properties=4)

        assert context["operation"] == "capture_current_state"
        assert context["target"] == ".btn"
        event, kwargs = base.debug.call_args_list[-1].args[0], base.debug.call_args_list[-1].kwargs
        assert event == "capture_completed"
        assert kwargs["properties"] == 4
        assert kwargs["duration"] >= 0

    def test_degraded_capture_logged_at_info(self) -> None:
        base = MagicMock(spec=structlog.stdlib.BoundLogger)
        capture_logger = CaptureLogger(base)

        context = capture_logger.log_capture_start("capture_current_state", "#missing")
        capture_logger.log_capture_end(context, ok=False, error="Element not found")

        base.info.assert_called_once()
        assert base.info.call_args.kwargs["error"] == "Element not found"

    def test_skipped_source(self) -> None:
        base = MagicMock(spec=structlog.stdlib.BoundLogger)

        CaptureLogger(base).log_skipped_source("sheet", "https://cdn.example.com/a.css", "denied")

        base.debug.assert_called_once_with(
            "style_source_skipped",
            kind="sheet",
            source="https://cdn.example.com/a.css",
            reason="denied",
        )

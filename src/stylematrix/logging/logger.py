"""Structured logging configuration for stylematrix using structlog.

Provides structured logging with context preservation for capture runs.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, cast

import structlog

from ..config import get_settings

DISABLE_CONSOLE_ENV = "STYLEMATRIX_DISABLE_CONSOLE_LOGGING"

_CALLSITE = [
    structlog.processors.CallsiteParameter.FILENAME,
    structlog.processors.CallsiteParameter.LINENO,
    structlog.processors.CallsiteParameter.FUNC_NAME,
]


def _console_disabled() -> bool:
    return os.getenv(DISABLE_CONSOLE_ENV) == "1"


def _build_processors(
    structured: bool, add_timestamp: bool, add_caller_info: bool, colorize: bool
) -> list[Any]:
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    if add_caller_info:
        processors.append(structlog.processors.CallsiteParameterAdder(parameters=_CALLSITE))

    processors += [
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if structured
        else structlog.dev.ConsoleRenderer(colors=colorize),
    ]
    return processors


def _build_handlers(console: bool, log_file: Path | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    structured: bool = True,
    console: bool = True,
    add_timestamp: bool = True,
    add_caller_info: bool = False,
    colorize: bool = True,
) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        structured: Render events as JSON
        console: Write to stderr (forced off by STYLEMATRIX_DISABLE_CONSOLE_LOGGING=1)
        add_timestamp: Add ISO timestamps
        add_caller_info: Add file, line and function of the call site
        colorize: Colorize console output (non-structured only)
    """
    if _console_disabled():
        console, log_file = False, None

    structlog.configure(
        processors=_build_processors(
            structured, add_timestamp, add_caller_info, colorize and console
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers = _build_handlers(console, log_file)
    if not handlers:
        # Nothing to write to; silence everything below CRITICAL.
        handlers, level = [logging.NullHandler()], "CRITICAL"

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )


_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Ensure logging is initialized (called lazily, not at import time)."""
    global _logging_initialized

    if _logging_initialized:
        return

    if _console_disabled():
        logging.disable(logging.CRITICAL)
        _logging_initialized = True
        return

    try:
        settings = get_settings()
        setup_logging(
            level="DEBUG" if settings.debug_mode else settings.log_level,
            structured=settings.structured_logging and not settings.debug_mode,
            colorize=settings.debug_mode,
        )
    except (ValueError, OSError):
        # Invalid environment configuration falls back to plain console logging
        setup_logging(level="INFO", structured=False)

    _logging_initialized = True


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    _ensure_logging_initialized()
    return cast(structlog.BoundLogger, structlog.get_logger(name))


class CaptureLogger:
    """Specialized logger for capture runs and skipped style sources."""

    def __init__(self, base_logger: structlog.BoundLogger | None = None) -> None:
        """Initialize capture logger.

        Args:
            base_logger: Base logger to use
        """
        self.logger = base_logger or get_logger(__name__)

    def log_capture_start(self, operation: str, target: Any, **kwargs) -> dict[str, Any]:
        """Log capture start.

        Args:
            operation: Name of the capture entry point
            target: Selector or element being captured
            **kwargs: Additional context

        Returns:
            Capture context dict
        """
        context = {
            "operation": operation,
            "target": str(target),
            "start_time": datetime.now().isoformat(),
            **kwargs,
        }
        self.logger.debug("capture_started", **context)
        return context

    def log_capture_end(
        self,
        context: dict[str, Any],
        ok: bool,
        error: str | None = None,
        **kwargs,
    ) -> None:
        """Log capture end.

        Args:
            context: Capture context from log_capture_start
            ok: Whether the capture produced a result
            error: Result error tag, if any
            **kwargs: Additional result details
        """
        end_time = datetime.now()
        start_time = datetime.fromisoformat(context["start_time"])
        log_data = {
            **context,
            "duration": (end_time - start_time).total_seconds(),
            "ok": ok,
            **kwargs,
        }
        if error:
            log_data["error"] = error

        if ok:
            self.logger.debug("capture_completed", **log_data)
        else:
            self.logger.info("capture_degraded", **log_data)

    def log_skipped_source(self, kind: str, source: str | None, reason: str) -> None:
        """Log a stylesheet or rule that could not be examined.

        Args:
            kind: "sheet" or "rule"
            source: Stylesheet href or rule selector text
            reason: Why it was skipped
        """
        self.logger.debug("style_source_skipped", kind=kind, source=source, reason=reason)

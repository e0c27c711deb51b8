"""Logging module for stylematrix."""

from .logger import CaptureLogger, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "CaptureLogger",
]

"""stylematrix: capture, diff and summarize UI interaction states.

Snapshots an element's resolved style per interaction state (default,
hover, focus, ...), approximates states from stylesheet rules when they
cannot be triggered, and folds everything into a per-element state matrix.
"""

from .capture import (
    CapturedState,
    PlaywrightStyleHost,
    StateCapture,
    StateDiff,
    StateMatrixStore,
    StateName,
    StateRecord,
    StateSummary,
    StyleHost,
    diff_states,
    generate_state_summary,
)
from .config import CaptureSettings, get_settings
from .logging import get_logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    "StateCapture",
    "StateMatrixStore",
    "StyleHost",
    "PlaywrightStyleHost",
    "CapturedState",
    "StateDiff",
    "StateName",
    "StateRecord",
    "StateSummary",
    "diff_states",
    "generate_state_summary",
    "CaptureSettings",
    "get_settings",
    "get_logger",
    "setup_logging",
]

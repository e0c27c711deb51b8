"""
Exception types and result tags for state capture.

Provides:
- Error kinds carried by entry-point results instead of raising
- Exception types raised by host implementations and recovered locally
- Timeout handling for the local interaction path
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Tags carried by results that could not be produced."""

    NOT_FOUND = "Element not found"
    INVALID_INPUT = "Invalid state objects"
    INVALID_STATE_DATA = "Invalid state data"

    @property
    def message(self) -> str:
        return self.value


class StateCaptureError(Exception):
    """Base exception for state capture errors."""

    pass


class ResolutionFailure(StateCaptureError):
    """Raised by a host when a locator does not resolve to an element."""

    pass


class SourceAccessDenied(StateCaptureError):
    """Raised when a stylesheet cannot be introspected (e.g. cross-origin)."""

    def __init__(self, href: str | None, reason: str = "access denied"):
        super().__init__(f"Cannot read stylesheet {href or '<inline>'}: {reason}")
        self.href = href
        self.reason = reason


class SelectorSyntaxError(StateCaptureError):
    """Raised when a residual selector is malformed or unsupported."""

    def __init__(self, selector: str, reason: str = "invalid selector"):
        super().__init__(f"{reason}: {selector!r}")
        self.selector = selector
        self.reason = reason


class InteractionTimeoutError(StateCaptureError):
    """Raised when a simulated interaction (or its reset) does not complete in time."""

    def __init__(self, action: str, timeout_seconds: float):
        super().__init__(f"{action} did not complete within {timeout_seconds:g}s")
        self.action = action
        self.timeout_seconds = timeout_seconds


async def with_timeout(
    coro: Any,
    timeout_seconds: float,
    action: str = "interaction",
) -> Any:
    """
    Await one interaction trigger or reset, bounded by a timeout.

    Used by the local interaction simulator so that a hover, focus or press
    that never settles costs at most ``timeout_seconds`` and surfaces as
    InteractionTimeoutError, which the simulator turns into a missing state.

    Args:
        coro: Trigger or reset coroutine.
        timeout_seconds: Upper bound in seconds.
        action: Trigger name for the error, e.g. ``"hover trigger"``.

    Returns:
        Result of the coroutine.

    Raises:
        InteractionTimeoutError: If the coroutine does not finish in time.
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise InteractionTimeoutError(action, timeout_seconds) from None

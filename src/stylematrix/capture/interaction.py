"""
Local interaction simulation.

When the page is driven by this process's own Playwright session there is
no need for an external driver: the simulator hovers, focuses or presses the
element itself, waits briefly for transitions to settle, and captures.

Each trigger is bounded by a timeout. A trigger that fails or times out
leaves its state out of the result; it never aborts the remaining states.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from playwright.async_api import ElementHandle
from playwright.async_api import Error as PlaywrightError

from ..config import get_settings
from .exceptions import InteractionTimeoutError, with_timeout
from .host import PlaywrightStyleHost
from .models import CapturedState, StateName
from .resolver import resolve_target
from .snapshot import SnapshotExtractor
from .store import StateMatrixStore

logger = logging.getLogger(__name__)

DEFAULT_SIMULATED_STATES: tuple[StateName, ...] = (
    StateName.HOVER,
    StateName.FOCUS,
    StateName.ACTIVE,
)

Trigger = Callable[[ElementHandle], Awaitable[None]]


class InteractionSimulator:
    """Drives live states on a Playwright page and captures each one."""

    def __init__(
        self,
        host: PlaywrightStyleHost,
        extractor: SnapshotExtractor | None = None,
        store: StateMatrixStore | None = None,
        settle_seconds: float | None = None,
        timeout_seconds: float | None = None,
    ):
        """
        Initialize the simulator.

        Args:
            host: Playwright-backed host; its page receives the interactions
            extractor: Extractor used after each trigger
            store: If given, every capture is stored as a live entry
            settle_seconds: Wait after a trigger before capturing
            timeout_seconds: Upper bound for a single trigger
        """
        settings = get_settings()
        self.host = host
        self.page = host.page
        self.extractor = extractor or SnapshotExtractor(host)
        self.store = store
        self.settle_seconds = (
            settings.interaction_settle_seconds if settle_seconds is None else settle_seconds
        )
        self.timeout_seconds = (
            settings.interaction_timeout_seconds if timeout_seconds is None else timeout_seconds
        )

        self._triggers: dict[StateName, tuple[Trigger, Trigger]] = {
            StateName.HOVER: (self._hover, self._unhover),
            StateName.FOCUS: (self._focus, self._blur),
            StateName.ACTIVE: (self._press, self._release),
        }

    @property
    def supported_states(self) -> list[StateName]:
        return list(self._triggers)

    async def _hover(self, element: ElementHandle) -> None:
        await element.hover(timeout=self.timeout_seconds * 1000)

    async def _unhover(self, element: ElementHandle) -> None:
        await self.page.mouse.move(0, 0)

    async def _focus(self, element: ElementHandle) -> None:
        await element.focus()

    async def _blur(self, element: ElementHandle) -> None:
        await element.evaluate("el => el.blur()")

    async def _press(self, element: ElementHandle) -> None:
        await element.hover(timeout=self.timeout_seconds * 1000)
        await self.page.mouse.down()

    async def _release(self, element: ElementHandle) -> None:
        # Release away from the element so no click (and no navigation) fires.
        await self.page.mouse.move(0, 0)
        await self.page.mouse.up()
        # Pressing also focused the element.
        await self._blur(element)

    async def _capture_in_state(
        self, element: ElementHandle, state: StateName
    ) -> CapturedState | None:
        trigger, reset = self._triggers[state]
        try:
            await with_timeout(trigger(element), self.timeout_seconds, f"{state.value} trigger")
            await asyncio.sleep(self.settle_seconds)
            return await self.extractor.capture(element)
        except (PlaywrightError, InteractionTimeoutError) as e:
            logger.warning(f"Could not simulate {state.value}: {e}")
            return None
        finally:
            try:
                await with_timeout(reset(element), self.timeout_seconds, f"{state.value} reset")
            except (PlaywrightError, InteractionTimeoutError) as e:
                logger.debug(f"Reset after {state.value} failed: {e}")

    async def capture_states(
        self,
        target: Any,
        states: Sequence[StateName] = DEFAULT_SIMULATED_STATES,
        key_base: str | None = None,
    ) -> dict[str, CapturedState]:
        """
        Capture default plus each requested state by simulating it locally.

        Args:
            target: CSS selector or live element
            states: States to simulate; unsupported ones are skipped
            key_base: Store key prefix, defaults to the element selector

        Returns:
            State name -> capture, for the states that succeeded. Empty when
            the target does not resolve.
        """
        resolution = await resolve_target(self.host, target)
        if not resolution.found:
            return {}

        element = resolution.element
        base = key_base or resolution.selector or str(target)
        results: dict[str, CapturedState] = {}

        default = await self.extractor.capture(element)
        if default.ok:
            results[StateName.DEFAULT.value] = default

        for state in states:
            if state not in self._triggers:
                logger.debug(f"No local trigger for {state.value}, skipping")
                continue
            captured = await self._capture_in_state(element, state)
            if captured is not None and captured.ok:
                results[state.value] = captured

        if self.store is not None:
            for state_value, captured in results.items():
                self.store.store(f"{base}-{state_value}", captured, state_name=state_value)

        return results

"""Tests for InteractionSimulator with mocked Playwright objects."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from fakes import FakeElement, FakeStyleHost
from playwright.async_api import Error as PlaywrightError

from stylematrix.capture.interaction import InteractionSimulator
from stylematrix.capture.models import StateName
from stylematrix.capture.snapshot import SnapshotExtractor
from stylematrix.capture.store import StateMatrixStore

DEFAULT = {"backgroundColor": "rgb(0, 0, 0)"}
HOVER = {"backgroundColor": "rgb(255, 0, 0)"}
FOCUS = {"backgroundColor": "rgb(0, 0, 0)", "outline": "2px solid blue"}
ACTIVE = {"backgroundColor": "rgb(0, 0, 0)", "transform": "scale(0.98)"}


@pytest.fixture
def live_button() -> FakeElement:
    """A button whose styles follow simulated interactions."""
    element = FakeElement(selector="#go", tag="button", styles=dict(DEFAULT))

    def apply(styles):
        def _apply(*args, **kwargs):
            element.styles = dict(styles)

        return _apply

    element.hover = AsyncMock(side_effect=apply(HOVER))
    element.focus = AsyncMock(side_effect=apply(FOCUS))
    element.evaluate = AsyncMock(side_effect=apply(DEFAULT))
    element.reset = apply(DEFAULT)
    element.press = apply(ACTIVE)
    return element


@pytest.fixture
def page(live_button):
    page = MagicMock()
    page.mouse.move = AsyncMock(side_effect=live_button.reset)
    page.mouse.down = AsyncMock(side_effect=live_button.press)
    page.mouse.up = AsyncMock()
    return page


@pytest.fixture
def live_host(live_button, page) -> FakeStyleHost:
    host = FakeStyleHost([live_button])
    host.page = page
    return host


def simulator(host, **kwargs) -> InteractionSimulator:
    extractor = SnapshotExtractor(host, include_subtree=False)
    return InteractionSimulator(
        host, extractor=extractor, settle_seconds=0, timeout_seconds=1, **kwargs
    )


class TestInteractionSimulator:
    """Tests for InteractionSimulator.capture_states."""

    @pytest.mark.asyncio
    async def test_captures_each_state(self, live_host) -> None:
        results = await simulator(live_host).capture_states("#go")

        assert {state: r.styles for state, r in results.items()} == {
            "default": DEFAULT,
            "hover": HOVER,
            "focus": FOCUS,
            "active": ACTIVE,
        }

    @pytest.mark.asyncio
    async def test_resets_after_each_trigger(self, live_host, live_button, page) -> None:
        await simulator(live_host).capture_states("#go")

        # Once after focus, once after the press.
        assert live_button.evaluate.await_count == 2
        live_button.evaluate.assert_awaited_with("el => el.blur()")
        page.mouse.up.assert_awaited_once()
        assert live_button.styles == DEFAULT

    @pytest.mark.asyncio
    async def test_failed_trigger_leaves_state_out(self, live_host, live_button) -> None:
        live_button.hover.side_effect = PlaywrightError("Element is outside of the viewport")

        results = await simulator(live_host).capture_states("#go")

        assert "hover" not in results
        assert "active" not in results
        assert results["focus"].styles == FOCUS

    @pytest.mark.asyncio
    async def test_timed_out_trigger_leaves_state_out(self, live_host, live_button) -> None:
        async def hang(*args, **kwargs):
            await asyncio.sleep(5)

        live_button.focus.side_effect = hang
        sim = InteractionSimulator(
            live_host,
            extractor=SnapshotExtractor(live_host, include_subtree=False),
            settle_seconds=0,
            timeout_seconds=0.01,
        )

        results = await sim.capture_states("#go")

        assert "focus" not in results
        assert results["hover"].styles == HOVER

    @pytest.mark.asyncio
    async def test_stores_live_entries(self, live_host) -> None:
        store = StateMatrixStore()

        await simulator(live_host, store=store).capture_states("#go", key_base="go")

        assert sorted(store.get_all()) == ["go-active", "go-default", "go-focus", "go-hover"]
        assert store.assemble_matrix()["#go"].states["hover"] == HOVER

    @pytest.mark.asyncio
    async def test_unresolved_target(self, live_host) -> None:
        assert await simulator(live_host).capture_states("#missing") == {}

    @pytest.mark.asyncio
    async def test_press_does_not_leave_element_focused(self, live_host, live_button, page) -> None:
        focused = {"value": False}

        def press(*args, **kwargs):
            focused["value"] = True
            live_button.styles = dict(ACTIVE)

        def hover(*args, **kwargs):
            ring = {"outline": "2px solid blue"} if focused["value"] else {}
            live_button.styles = {**HOVER, **ring}

        def blur(*args, **kwargs):
            focused["value"] = False
            live_button.styles = dict(DEFAULT)

        page.mouse.down.side_effect = press
        live_button.hover.side_effect = hover
        live_button.evaluate.side_effect = blur

        results = await simulator(live_host).capture_states(
            "#go", states=(StateName.ACTIVE, StateName.HOVER)
        )

        assert results["active"].styles == ACTIVE
        assert results["hover"].styles == HOVER
        assert focused["value"] is False

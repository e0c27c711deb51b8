"""Tests for the StateCapture entry points."""

import pytest
from fakes import FakeStyleHost, make_node, rule

from stylematrix.capture.models import StateName, StylesheetSource
from stylematrix.capture.state_capture import StateCapture
from stylematrix.capture.store import StateMatrixStore
from stylematrix.capture.workflow import WorkflowAction
from stylematrix.config import CaptureSettings


@pytest.fixture
def capture(host) -> StateCapture:
    return StateCapture(host, settings=CaptureSettings())


class TestCaptureCurrentState:
    @pytest.mark.asyncio
    async def test_found(self, capture) -> None:
        state = await capture.capture_current_state(".btn")

        assert state.ok
        assert state.styles["backgroundColor"] == "rgb(0, 0, 0)"

    @pytest.mark.asyncio
    async def test_not_found(self, capture) -> None:
        state = await capture.capture_current_state("#missing")

        assert state.to_dict() == {"ok": False, "error": "Element not found"}

    @pytest.mark.asyncio
    async def test_settings_bound_subtree(self, host, button) -> None:
        button.descendants = [
            make_node(f"svg:nth-of-type({i})", tag="svg", fill="red") for i in range(1, 5)
        ]
        capture = StateCapture(host, settings=CaptureSettings(max_subtree_nodes=1))

        state = await capture.capture_current_state(".btn")

        sampled = [k for k in state.styles if k.startswith("desc:")]
        assert sampled == ["desc:svg:nth-of-type(1).fill"]


class TestFallback:
    @pytest.mark.asyncio
    async def test_extract_and_store(self, host, capture) -> None:
        host.sheets = [StylesheetSource(href=None, rules=[rule(".btn:hover", color="red")])]

        result = await capture.extract_all_states_fallback(".btn", store_results=True)

        assert result.ok
        assert sorted(capture.store.get_all()) == [".btn:fallback-default", ".btn:fallback-hover"]
        assert capture.get_stored_state_matrix()[".btn"].states["hover"]["color"] == "red"

    @pytest.mark.asyncio
    async def test_fallback_combines_with_live_default(self, host, button, capture) -> None:
        button.descendants = [make_node(".btn > svg", tag="svg", fill="rgb(0, 0, 255)")]
        host.sheets = [
            StylesheetSource(
                href=None, rules=[rule(".btn:hover", background_color="rgb(255, 0, 0)")]
            )
        ]
        capture.store_state("btn-default", await capture.capture_current_state(".btn"))

        await capture.extract_all_states_fallback(".btn", store_results=True)

        summary = capture.generate_stored_summaries()[".btn"]
        assert summary.state_descriptions["hover"] == [
            "background changes from rgb(0, 0, 0) to rgb(255, 0, 0)"
        ]
        states = capture.get_stored_state_matrix()[".btn"].states
        assert states["hover"]["desc:.btn > svg.fill"] == "rgb(0, 0, 255)"

    @pytest.mark.asyncio
    async def test_not_stored_by_default(self, host, capture) -> None:
        host.sheets = [StylesheetSource(href=None, rules=[rule(".btn:hover", color="red")])]

        await capture.extract_all_states_fallback(".btn")

        assert len(capture.store) == 0


class TestCommands:
    @pytest.mark.asyncio
    async def test_generate_commands(self, capture) -> None:
        result = await capture.generate_commands(".btn")

        assert result.ok
        assert result.workflow.actions[0] is WorkflowAction.TAKE_SNAPSHOT
        assert result.to_dict()["is_interactive"] is True

    @pytest.mark.asyncio
    async def test_generate_commands_inert(self, capture) -> None:
        result = await capture.generate_commands("div.note")

        assert result.workflow.actions == [WorkflowAction.CAPTURE_DEFAULT]

    @pytest.mark.asyncio
    async def test_generate_commands_not_found(self, capture) -> None:
        result = await capture.generate_commands("#missing")

        assert result.to_dict() == {"ok": False, "error": "Element not found"}

    @pytest.mark.asyncio
    async def test_batch_capture(self, capture) -> None:
        batch = await capture.batch_capture([".btn", "#missing", "div.note"])

        assert batch.total_elements == 2
        assert batch.errors == [{"selector": "#missing", "error": "Element not found"}]
        assert batch.steps[1].selectors == [".btn", "div.note"]


class TestStoredStates:
    """Tests for the store-backed entry points."""

    @pytest.mark.asyncio
    async def test_capture_store_and_summarize(self, host, button, capture) -> None:
        capture.store_state(".btn-default", await capture.capture_current_state(".btn"))
        button.styles["backgroundColor"] = "rgb(40, 40, 40)"
        result = capture.store_state(".btn-hover", await capture.capture_current_state(".btn"))

        assert result.to_dict() == {"ok": True, "key": ".btn-hover", "state_name": "hover"}
        summaries = capture.generate_stored_summaries()
        assert summaries[".btn"].description("hover") == (
            "background changes from rgb(0, 0, 0) to rgb(40, 40, 40)"
        )

    @pytest.mark.asyncio
    async def test_store_not_found_capture(self, capture) -> None:
        result = capture.store_state("x-hover", await capture.capture_current_state("#missing"))

        assert result.ok is False
        assert capture.get_stored_state("x-hover") is None

    def test_explicit_state_name(self, capture) -> None:
        capture.store_state("pressed", {"selector": ".btn", "styles": {}}, StateName.ACTIVE)

        assert capture.get_stored_state("pressed").resolved_state is StateName.ACTIVE

    def test_clear(self, capture) -> None:
        capture.store_state("a-hover", {"selector": ".a", "styles": {"color": "red"}})
        capture.store_state("b-hover", {"selector": ".b", "styles": {"color": "red"}})

        assert capture.clear_stored_states() == 2
        assert capture.get_stored_state_matrix() == {}

    def test_shared_store(self, host) -> None:
        store = StateMatrixStore()
        StateCapture(host, store=store, settings=CaptureSettings()).store_state(
            "a-hover", {"selector": ".a", "styles": {}}
        )

        assert "a-hover" in StateCapture(host, store=store, settings=CaptureSettings()).store


class TestPureOperations:
    def test_diff_states(self) -> None:
        diff = StateCapture.diff_states({"color": "red"}, {"color": "blue"})

        assert diff.change_count == 1

    def test_generate_state_summary(self) -> None:
        summary = StateCapture.generate_state_summary(None)

        assert summary.error == "Invalid state data"


class TestSimulation:
    @pytest.mark.asyncio
    async def test_unavailable_without_playwright_host(self, capture) -> None:
        assert await capture.simulate_states(".btn") == {}

    @pytest.mark.asyncio
    async def test_empty_host(self) -> None:
        capture = StateCapture(FakeStyleHost(), settings=CaptureSettings())

        state = await capture.capture_current_state(".btn")

        assert state.ok is False

"""
Entry points for interaction-state capture.

``StateCapture`` wires one host to one store and exposes every capture
operation as an async call returning a tagged result (``ok`` plus either
the payload or an ``error``). Unresolved elements and unreadable style
sources never raise out of these calls.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..config import CaptureSettings, get_settings
from ..logging import CaptureLogger, get_logger
from .diff import diff_states as _diff_states
from .exceptions import ErrorKind
from .host import PlaywrightStyleHost, StyleHost
from .interaction import InteractionSimulator
from .models import CapturedState, StateDiff, StateName, StateRecord
from .resolver import resolve_target
from .rule_matcher import FallbackResult, RuleMatcher
from .snapshot import SnapshotExtractor
from .store import StateMatrixStore, StoredState
from .subtree import SubtreeSampler
from .summary import StateSummary
from .summary import generate_state_summary as _generate_state_summary
from .workflow import BatchWorkflow, Workflow, WorkflowPlanner

logger = get_logger(__name__)


@dataclass
class CommandsResult:
    """Workflow for one element, or the reason none could be planned."""

    ok: bool
    workflow: Workflow | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.ok or self.workflow is None:
            return {"ok": False, "error": self.error}
        return self.workflow.to_dict()


@dataclass
class StoreResult:
    """Outcome of storing one state."""

    ok: bool
    key: str
    state_name: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"ok": False, "key": self.key, "error": self.error}
        return {"ok": True, "key": self.key, "state_name": self.state_name}


class StateCapture:
    """Capture, store, diff and summarize interaction states for one page."""

    def __init__(
        self,
        host: StyleHost,
        store: StateMatrixStore | None = None,
        settings: CaptureSettings | None = None,
        planner: WorkflowPlanner | None = None,
    ):
        """
        Initialize the facade.

        Args:
            host: Host for the page being captured
            store: Session store; a fresh one is created if omitted
            settings: Capture settings; the global settings if omitted
            planner: Workflow planner for driver-mediated capture
        """
        self.host = host
        self.store = store if store is not None else StateMatrixStore()
        self.settings = settings or get_settings()
        self.planner = planner or WorkflowPlanner()

        sampler = SubtreeSampler(
            host,
            max_nodes=self.settings.max_subtree_nodes,
            include_pseudo=self.settings.include_pseudo_elements,
        )
        self.extractor = SnapshotExtractor(
            host, sampler=sampler, include_subtree=self.settings.include_subtree
        )
        self.matcher = RuleMatcher(host, extractor=self.extractor)
        self.capture_logger = CaptureLogger(logger)

    async def capture_current_state(self, target: Any) -> CapturedState:
        """Snapshot ``target`` in whatever state the page currently has it."""
        context = self.capture_logger.log_capture_start("capture_current_state", target)
        result = await self.extractor.capture(target)
        self.capture_logger.log_capture_end(
            context, result.ok, result.error, properties=len(result.styles)
        )
        return result

    async def extract_all_states_fallback(
        self, target: Any, store_results: bool = False, key_base: str | None = None
    ) -> FallbackResult:
        """
        Approximate every tracked state from stylesheet rules.

        Args:
            target: CSS selector or live element
            store_results: Also store the inferred states as fallback entries
            key_base: Prefix for stored keys; defaults to the element selector
        """
        context = self.capture_logger.log_capture_start("extract_all_states_fallback", target)
        result = await self.matcher.extract_states(target)
        if result.ok and store_results:
            self.store.store_fallback(result, key_base=key_base)
        self.capture_logger.log_capture_end(
            context, result.ok, result.error, states=result.state_count
        )
        return result

    async def simulate_states(
        self,
        target: Any,
        states: Sequence[StateName] | None = None,
        key_base: str | None = None,
    ) -> dict[str, CapturedState]:
        """
        Capture live states by driving the page directly.

        Only available for a Playwright host; other hosts get an empty
        result. Captures are stored as live entries.
        """
        if not isinstance(self.host, PlaywrightStyleHost):
            logger.info("simulation_unavailable", host=type(self.host).__name__)
            return {}

        simulator = InteractionSimulator(
            self.host,
            extractor=self.extractor,
            store=self.store,
            settle_seconds=self.settings.interaction_settle_seconds,
            timeout_seconds=self.settings.interaction_timeout_seconds,
        )
        if states is None:
            return await simulator.capture_states(target, key_base=key_base)
        return await simulator.capture_states(target, states=states, key_base=key_base)

    async def generate_commands(self, target: Any, key_base: str | None = None) -> CommandsResult:
        """Plan the driver workflow for capturing one element's live states."""
        resolution = await resolve_target(self.host, target)
        if not resolution.found or resolution.description is None:
            return CommandsResult(ok=False, error=ErrorKind.NOT_FOUND.message)
        return CommandsResult(
            ok=True, workflow=self.planner.plan(resolution.description, key_base=key_base)
        )

    async def batch_capture(self, targets: Sequence[Any]) -> BatchWorkflow:
        """
        Plan grouped captures for several elements.

        Targets that do not resolve are reported in ``errors`` and left out
        of every step.
        """
        descriptions = []
        errors: list[dict[str, str]] = []
        for target in targets:
            resolution = await resolve_target(self.host, target)
            if resolution.found and resolution.description is not None:
                descriptions.append(resolution.description)
            else:
                errors.append({"selector": str(target), "error": ErrorKind.NOT_FOUND.message})

        if errors:
            logger.info("batch_targets_unresolved", unresolved=len(errors), total=len(targets))
        return self.planner.plan_batch(descriptions, errors=errors)

    def store_state(
        self,
        key: str,
        state: CapturedState | Mapping[str, Any],
        state_name: StateName | str | None = None,
    ) -> StoreResult:
        """Store a live capture under ``key``."""
        stored = self.store.store(key, state, state_name=state_name)
        if stored is None:
            return StoreResult(ok=False, key=key, error=ErrorKind.INVALID_STATE_DATA.message)
        return StoreResult(ok=True, key=key, state_name=stored.resolved_state.value)

    def get_stored_state(self, key: str) -> StoredState | None:
        return self.store.get(key)

    def clear_stored_states(self) -> int:
        """Drop every stored entry; returns how many were dropped."""
        count = len(self.store)
        self.store.clear()
        return count

    def get_stored_state_matrix(self) -> dict[str, StateRecord]:
        return self.store.assemble_matrix()

    def generate_stored_summaries(self) -> dict[str, StateSummary]:
        return self.store.generate_summaries()

    @staticmethod
    def diff_states(before: Any, after: Any) -> StateDiff:
        return _diff_states(before, after)

    @staticmethod
    def generate_state_summary(record: Any) -> StateSummary:
        return _generate_state_summary(record)

"""Interaction-state capture: snapshots, rule fallback, diffs and the state matrix."""

from .diff import diff_states
from .exceptions import (
    ErrorKind,
    InteractionTimeoutError,
    ResolutionFailure,
    SelectorSyntaxError,
    SourceAccessDenied,
    StateCaptureError,
)
from .host import PlaywrightStyleHost, StyleHost
from .interaction import InteractionSimulator
from .models import (
    BoundingBox,
    CapturedState,
    CaptureSource,
    DescendantNode,
    ElementAffordances,
    ElementDescription,
    ElementIdentifier,
    PropertyChange,
    StateDiff,
    StateName,
    StateRecord,
    StyleRule,
    StylesheetSource,
    StyleSnapshot,
)
from .properties import STATE_PROPERTIES, SUBTREE_PROPERTIES, extract_styles
from .resolver import Resolution, resolve_target
from .rule_matcher import FallbackResult, RuleMatcher, RuleScanReport
from .snapshot import SnapshotExtractor
from .state_capture import CommandsResult, StateCapture, StoreResult
from .store import StateMatrixStore, StoredState, infer_state_name
from .subtree import ScoringWeights, SubtreeSampler
from .summary import StateSummary, generate_state_summary
from .workflow import BatchWorkflow, Workflow, WorkflowAction, WorkflowPlanner, WorkflowStep

__all__ = [
    # Entry points
    "StateCapture",
    "CommandsResult",
    "StoreResult",
    # Components
    "SnapshotExtractor",
    "SubtreeSampler",
    "ScoringWeights",
    "RuleMatcher",
    "StateMatrixStore",
    "WorkflowPlanner",
    "InteractionSimulator",
    # Host
    "StyleHost",
    "PlaywrightStyleHost",
    "Resolution",
    "resolve_target",
    # Pure functions
    "diff_states",
    "generate_state_summary",
    "extract_styles",
    "infer_state_name",
    "STATE_PROPERTIES",
    "SUBTREE_PROPERTIES",
    # Models
    "BoundingBox",
    "CapturedState",
    "CaptureSource",
    "DescendantNode",
    "ElementAffordances",
    "ElementDescription",
    "ElementIdentifier",
    "PropertyChange",
    "StateDiff",
    "StateName",
    "StateRecord",
    "StyleRule",
    "StylesheetSource",
    "StyleSnapshot",
    "StoredState",
    "FallbackResult",
    "RuleScanReport",
    "StateSummary",
    "Workflow",
    "WorkflowStep",
    "WorkflowAction",
    "BatchWorkflow",
    # Errors
    "ErrorKind",
    "StateCaptureError",
    "ResolutionFailure",
    "SourceAccessDenied",
    "SelectorSyntaxError",
    "InteractionTimeoutError",
]

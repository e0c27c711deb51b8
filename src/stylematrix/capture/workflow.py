"""
Workflow planning for live state capture.

Live states (hover, focus) can only be observed after something actually
interacts with the page. The planner does not interact; it emits an ordered,
advisory list of steps for an external driver: trigger an interaction, then
invoke the capture entry point, then reset.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .models import ElementAffordances, ElementDescription, ElementIdentifier, StateName

INTERACTIVE_TAGS = frozenset({"button", "a", "input", "select", "textarea"})
INTERACTIVE_ROLES = frozenset({"button", "link", "menuitem", "tab", "checkbox", "radio"})
FOCUSABLE_TAGS = frozenset({"button", "input", "select", "textarea", "a"})

ELEMENT_UID_PLACEHOLDER = "<element_uid>"


def is_interactive(affordances: ElementAffordances) -> bool:
    """Whether the element responds to pointer hover/click."""
    if affordances.tag.lower() in INTERACTIVE_TAGS:
        return True
    if (affordances.role or "").lower() in INTERACTIVE_ROLES:
        return True
    if affordances.has_click_handler:
        return True
    if affordances.cursor == "pointer":
        return True
    return affordances.tabindex is not None and affordances.tabindex >= 0


def is_focusable(affordances: ElementAffordances) -> bool:
    """Whether the element can receive keyboard focus."""
    if affordances.tag.lower() in FOCUSABLE_TAGS:
        return not affordances.disabled
    if affordances.tabindex is not None:
        return affordances.tabindex >= 0
    return affordances.content_editable


class WorkflowAction(str, Enum):
    TAKE_SNAPSHOT = "take_snapshot"
    CAPTURE_DEFAULT = "capture_default"
    HOVER = "hover"
    CAPTURE_HOVER = "capture_hover"
    CLICK_FOR_FOCUS = "click_for_focus"
    CAPTURE_FOCUS = "capture_focus"
    BLUR = "blur"

    # Batch workflows
    BATCH_CAPTURE = "batch_capture"
    HOVER_SEQUENCE = "hover_sequence"
    FOCUS_SEQUENCE = "focus_sequence"


@dataclass
class DriverRequest:
    """Machine-actionable request for the interaction driver."""

    tool: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.tool, "params": dict(self.params)}


@dataclass
class WorkflowStep:
    index: int
    action: WorkflowAction
    purpose: str
    instruction: str
    driver_request: DriverRequest | None = None
    state: StateName | None = None
    state_key: str | None = None
    selectors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "step": self.index,
            "action": self.action.value,
            "purpose": self.purpose,
            "instruction": self.instruction,
        }
        if self.driver_request:
            data["driver_request"] = self.driver_request.to_dict()
        if self.state:
            data["state"] = self.state.value
        if self.state_key:
            data["state_key"] = self.state_key
        if self.selectors:
            data["selectors"] = list(self.selectors)
        return data


@dataclass
class Workflow:
    """Ordered capture plan for one element."""

    element: ElementIdentifier
    is_interactive: bool
    is_focusable: bool
    steps: list[WorkflowStep] = field(default_factory=list)

    @property
    def driver_requests(self) -> list[DriverRequest]:
        return [s.driver_request for s in self.steps if s.driver_request]

    @property
    def actions(self) -> list[WorkflowAction]:
        return [s.action for s in self.steps]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": True,
            "element": self.element.to_dict(),
            "is_interactive": self.is_interactive,
            "is_focusable": self.is_focusable,
            "workflow": [s.to_dict() for s in self.steps],
            "driver_requests": [r.to_dict() for r in self.driver_requests],
        }


@dataclass
class BatchWorkflow:
    """Grouped capture plan for several elements."""

    total_elements: int
    steps: list[WorkflowStep] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": True,
            "total_elements": self.total_elements,
            "errors": list(self.errors),
            "steps": [s.to_dict() for s in self.steps],
        }


def _capture_instruction(selector: str, state_key: str) -> str:
    return (
        f"Run capture_current_state({selector!r}) and store the result "
        f"under key {state_key!r}"
    )


class WorkflowPlanner:
    """Builds driver workflows from resolved element descriptions."""

    def __init__(self, hover_tool: str = "hover", click_tool: str = "click"):
        """
        Initialize the planner.

        Args:
            hover_tool: Driver tool name used for hover requests
            click_tool: Driver tool name used for click requests
        """
        self.hover_tool = hover_tool
        self.click_tool = click_tool

    def _request(self, tool: str) -> DriverRequest:
        return DriverRequest(
            tool=tool, params={"uid": ELEMENT_UID_PLACEHOLDER, "includeSnapshot": False}
        )

    def plan(self, description: ElementDescription, key_base: str | None = None) -> Workflow:
        """
        Plan default, hover and focus captures for one element.

        Hover steps are emitted only for interactive elements and focus steps
        only for focusable ones. The inventory snapshot (to look up a driver
        handle) is emitted only when a driver interaction follows.

        Args:
            description: Resolved element
            key_base: Prefix for store keys; defaults to the element selector
        """
        identifier = description.identifier
        selector = identifier.selector
        base = key_base or selector
        interactive = is_interactive(description.affordances)
        focusable = is_focusable(description.affordances)

        steps: list[WorkflowStep] = []

        def add(
            action: WorkflowAction,
            purpose: str,
            instruction: str,
            request: DriverRequest | None = None,
            state: StateName | None = None,
        ) -> None:
            steps.append(
                WorkflowStep(
                    index=len(steps) + 1,
                    action=action,
                    purpose=purpose,
                    instruction=instruction,
                    driver_request=request,
                    state=state,
                    state_key=f"{base}-{state.value}" if state else None,
                )
            )

        if interactive or focusable:
            add(
                WorkflowAction.TAKE_SNAPSHOT,
                "Get element handle from the page inventory",
                f"Take a page snapshot, then find the element matching: {selector}",
            )
        add(
            WorkflowAction.CAPTURE_DEFAULT,
            "Extract default state styles",
            _capture_instruction(selector, f"{base}-default"),
            state=StateName.DEFAULT,
        )

        if interactive:
            add(
                WorkflowAction.HOVER,
                "Trigger hover state",
                f"Use the driver's {self.hover_tool} tool with the element handle",
                request=self._request(self.hover_tool),
            )
            add(
                WorkflowAction.CAPTURE_HOVER,
                "Extract hover state styles",
                _capture_instruction(selector, f"{base}-hover"),
                state=StateName.HOVER,
            )

        if focusable:
            add(
                WorkflowAction.CLICK_FOR_FOCUS,
                "Trigger focus state via click",
                f"Use the driver's {self.click_tool} tool with the element handle",
                request=self._request(self.click_tool),
            )
            add(
                WorkflowAction.CAPTURE_FOCUS,
                "Extract focus state styles",
                _capture_instruction(selector, f"{base}-focus"),
                state=StateName.FOCUS,
            )
            add(
                WorkflowAction.BLUR,
                "Reset focus state",
                f"Run: document.querySelector({selector!r}).blur()",
            )

        return Workflow(
            element=identifier,
            is_interactive=interactive,
            is_focusable=focusable,
            steps=steps,
        )

    def plan_batch(
        self,
        descriptions: list[ElementDescription],
        errors: list[dict[str, str]] | None = None,
    ) -> BatchWorkflow:
        """
        Plan grouped captures for several elements.

        One inventory snapshot and one default capture pass cover every
        element; hover and focus passes list only the elements they apply to.

        Args:
            descriptions: Resolved elements
            errors: Targets that did not resolve, reported as-is
        """
        selectors = [d.selector for d in descriptions]
        hoverable = [d.selector for d in descriptions if is_interactive(d.affordances)]
        focusable = [d.selector for d in descriptions if is_focusable(d.affordances)]

        steps = [
            WorkflowStep(
                index=1,
                action=WorkflowAction.TAKE_SNAPSHOT,
                purpose="Get element handles from the page inventory",
                instruction="Take an initial page snapshot to get handles for all elements",
            ),
            WorkflowStep(
                index=2,
                action=WorkflowAction.BATCH_CAPTURE,
                purpose="Extract default state styles",
                instruction="Capture default states for all elements, storing each under <selector>-default",
                state=StateName.DEFAULT,
                selectors=selectors,
            ),
        ]
        if hoverable:
            steps.append(
                WorkflowStep(
                    index=len(steps) + 1,
                    action=WorkflowAction.HOVER_SEQUENCE,
                    purpose="Extract hover state styles",
                    instruction="For each interactive element: hover -> capture -> move away",
                    driver_request=self._request(self.hover_tool),
                    state=StateName.HOVER,
                    selectors=hoverable,
                )
            )
        if focusable:
            steps.append(
                WorkflowStep(
                    index=len(steps) + 1,
                    action=WorkflowAction.FOCUS_SEQUENCE,
                    purpose="Extract focus state styles",
                    instruction="For each focusable element: click -> capture -> blur",
                    driver_request=self._request(self.click_tool),
                    state=StateName.FOCUS,
                    selectors=focusable,
                )
            )

        return BatchWorkflow(
            total_elements=len(descriptions),
            steps=steps,
            errors=list(errors or []),
        )

"""
Short natural-language summaries of state changes.

Purely presentational: each changed property becomes one phrase via a fixed
phrasing table, for documentation and for AI consumers of the state matrix.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .diff import diff_states
from .exceptions import ErrorKind
from .models import PropertyChange, StateName, StateRecord


def _transform_phrase(change: PropertyChange) -> str:
    to_value = change.to_value or ""
    if "scale" in to_value:
        return "element scales"
    if "translate" in to_value:
        return "element moves"
    return f"transform: {change.to_value}"


def _shadow_phrase(change: PropertyChange) -> str:
    if change.to_value and change.to_value != "none":
        return "shadow appears/changes"
    return "shadow removed"


PHRASES: dict[str, Callable[[PropertyChange], str]] = {
    "backgroundColor": lambda c: f"background changes from {c.from_value} to {c.to_value}",
    "color": lambda c: f"text color changes to {c.to_value}",
    "transform": _transform_phrase,
    "opacity": lambda c: f"opacity changes to {c.to_value}",
    "boxShadow": _shadow_phrase,
    "borderColor": lambda c: f"border color changes to {c.to_value}",
    "outline": lambda c: "focus ring appears",
    "outlineColor": lambda c: "focus ring appears",
}


def describe_change(prop: str, change: PropertyChange) -> str:
    """Phrase for one changed property; unknown properties read ``<prop>: <to>``."""
    phrase = PHRASES.get(prop)
    if phrase is None:
        return f"{prop}: {change.to_value}"
    return phrase(change)


def describe_state_changes(changes: Mapping[str, PropertyChange]) -> list[str]:
    return [describe_change(prop, change) for prop, change in changes.items()]


@dataclass
class KeyChange:
    state: str
    property: str
    from_value: str | None
    to_value: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "property": self.property,
            "from": self.from_value,
            "to": self.to_value,
        }


@dataclass
class StateSummary:
    """Per-state phrases for one element."""

    ok: bool
    selector: str | None = None
    state_descriptions: dict[str, list[str]] = field(default_factory=dict)
    key_changes: list[KeyChange] = field(default_factory=list)
    error: str | None = None

    @property
    def has_interactive_states(self) -> bool:
        return bool(self.state_descriptions)

    def description(self, state: str) -> str:
        """Phrases for ``state`` joined into one line."""
        return ", ".join(self.state_descriptions.get(state, []))

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"ok": False, "error": self.error}
        return {
            "ok": True,
            "selector": self.selector,
            "has_interactive_states": self.has_interactive_states,
            "state_descriptions": {
                state: ", ".join(phrases) for state, phrases in self.state_descriptions.items()
            },
            "key_changes": [change.to_dict() for change in self.key_changes],
        }


def generate_state_summary(record: StateRecord | Mapping[str, Any] | None) -> StateSummary:
    """
    Summarize how each non-default state differs from ``default``.

    States without any change are left out. A record without a default
    snapshot is compared against an empty one.

    Args:
        record: StateRecord, or a mapping with ``selector`` and ``states``

    Returns:
        StateSummary; ``ok`` is False with "Invalid state data" for input
        without a states mapping.
    """
    if isinstance(record, StateRecord):
        selector, states = record.selector, record.states
    elif isinstance(record, Mapping) and isinstance(record.get("states"), Mapping):
        selector, states = record.get("selector"), record["states"]
    else:
        return StateSummary(ok=False, error=ErrorKind.INVALID_STATE_DATA.message)

    summary = StateSummary(ok=True, selector=selector)
    baseline = states.get(StateName.DEFAULT.value) or {}

    for state_name, styles in states.items():
        if state_name == StateName.DEFAULT.value:
            continue
        diff = diff_states(baseline, styles or {})
        if not diff.ok or not diff.has_changes:
            continue

        summary.state_descriptions[state_name] = describe_state_changes(diff.changes)
        summary.key_changes.extend(
            KeyChange(
                state=state_name,
                property=prop,
                from_value=change.from_value,
                to_value=change.to_value,
            )
            for prop, change in diff.changes.items()
        )

    return summary

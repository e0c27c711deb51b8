"""
Data models for interaction-state capture.

These models represent element locators, style snapshots, stylesheet
sources and per-element state records exchanged between the capture
components and their consumers.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import ErrorKind

# Sparse mapping of property name (or namespaced subtree key) to value.
StyleSnapshot = dict[str, str]


class StateName(str, Enum):
    """Interaction states tracked per element. ``default`` is the diff baseline."""

    DEFAULT = "default"
    HOVER = "hover"
    ACTIVE = "active"
    FOCUS = "focus"
    FOCUS_VISIBLE = "focusVisible"
    FOCUS_WITHIN = "focusWithin"
    DISABLED = "disabled"
    CHECKED = "checked"
    INVALID = "invalid"


class CaptureSource(str, Enum):
    """Where a stored state snapshot came from."""

    LIVE = "live"
    FALLBACK = "fallback"


@dataclass
class BoundingBox:
    """Bounding box for an element, in CSS pixels."""

    x: int
    y: int
    width: int
    height: int

    @property
    def center(self) -> tuple[int, int]:
        return (self.x + self.width // 2, self.y + self.height // 2)

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def to_dict(self) -> dict[str, int]:
        center_x, center_y = self.center
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "center_x": center_x,
            "center_y": center_y,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BoundingBox":
        return cls(
            x=round(data.get("x", 0)),
            y=round(data.get("y", 0)),
            width=round(data.get("width", 0)),
            height=round(data.get("height", 0)),
        )


@dataclass
class ElementIdentifier:
    """
    Reconstructable locator for an element.

    Not an ownership handle: the host re-resolves ``selector`` on every use.
    """

    selector: str
    rect: BoundingBox
    tag: str
    text: str = ""
    id: str | None = None
    classes: list[str] | None = None
    role: str | None = None
    aria_label: str | None = None

    # Form hints
    type: str | None = None
    name: str | None = None
    placeholder: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "rect": self.rect.to_dict(),
            "tag": self.tag,
            "text": self.text,
            "id": self.id,
            "classes": self.classes,
            "role": self.role,
            "aria_label": self.aria_label,
            "type": self.type,
            "name": self.name,
            "placeholder": self.placeholder,
        }


@dataclass
class ElementAffordances:
    """Signals used to decide whether an element can be hovered or focused."""

    tag: str
    role: str | None = None
    cursor: str | None = None
    has_click_handler: bool = False
    tabindex: int | None = None  # None when the attribute is absent
    disabled: bool = False
    content_editable: bool = False


@dataclass
class ElementDescription:
    """Identifier plus affordances for one resolved element."""

    identifier: ElementIdentifier
    affordances: ElementAffordances

    @property
    def selector(self) -> str:
        return self.identifier.selector


@dataclass
class DescendantNode:
    """Raw facts about one descendant, as reported by the host.

    ``width``/``height`` are unrounded CSS pixels; visibility and area
    scoring use them as-is.
    """

    path: str
    tag: str
    width: float = 0.0
    height: float = 0.0
    display: str = ""
    visibility: str = ""
    opacity: str = "1"
    text: str = ""
    has_role: bool = False
    has_aria_label: bool = False
    styles: dict[str, str] = field(default_factory=dict)

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_visible(self) -> bool:
        if self.width <= 0 or self.height <= 0:
            return False
        if self.display == "none" or self.visibility == "hidden":
            return False
        try:
            return float(self.opacity or "1") > 0
        except ValueError:
            return True


@dataclass
class StyleRule:
    """A style rule: selector text plus declared kebab-case properties."""

    selector_text: str
    declarations: dict[str, str] = field(default_factory=dict)


@dataclass
class StylesheetSource:
    """One stylesheet as enumerated by the host.

    ``error`` is set when the sheet's rules could not be read; ``rules`` is
    then empty.
    """

    href: str | None
    rules: list[StyleRule] = field(default_factory=list)
    error: str | None = None

    @property
    def accessible(self) -> bool:
        return self.error is None


@dataclass
class CapturedState:
    """Result of capturing an element's current style."""

    ok: bool
    selector: str | None = None
    styles: StyleSnapshot = field(default_factory=dict)
    rect: BoundingBox | None = None
    timestamp: float = field(default_factory=time.time)
    error: str | None = None

    @classmethod
    def not_found(cls) -> "CapturedState":
        return cls(ok=False, error=ErrorKind.NOT_FOUND.message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok}
        if not self.ok:
            data["error"] = self.error
            return data
        data.update(
            {
                "selector": self.selector,
                "timestamp": self.timestamp,
                "styles": dict(self.styles),
                "rect": self.rect.to_dict() if self.rect else None,
            }
        )
        return data


@dataclass
class PropertyChange:
    """Value of one property before and after a state change."""

    from_value: str | None
    to_value: str | None

    def reversed(self) -> "PropertyChange":
        return PropertyChange(from_value=self.to_value, to_value=self.from_value)

    def to_dict(self) -> dict[str, str | None]:
        return {"from": self.from_value, "to": self.to_value}


@dataclass
class StateDiff:
    """Property-level difference between two snapshots."""

    ok: bool
    changes: dict[str, PropertyChange] = field(default_factory=dict)
    error: str | None = None

    @property
    def has_changes(self) -> bool:
        return bool(self.changes)

    @property
    def change_count(self) -> int:
        return len(self.changes)

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"ok": False, "error": self.error}
        return {
            "ok": True,
            "has_changes": self.has_changes,
            "change_count": self.change_count,
            "changes": {prop: change.to_dict() for prop, change in self.changes.items()},
        }


@dataclass
class StateRecord:
    """Per-element state matrix row: state name (``StateName`` value) to snapshot."""

    selector: str
    states: dict[str, StyleSnapshot] = field(default_factory=dict)

    @property
    def default(self) -> StyleSnapshot | None:
        return self.states.get(StateName.DEFAULT.value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "states": {state: dict(styles) for state, styles in self.states.items()},
        }

"""
Session-lifetime store for captured states.

A driver captures each state of an element separately (default, then hover,
then focus, ...) and stores every capture under its own key. The store
folds those entries into a per-selector state matrix.

The store is an explicit object; create one per session and pass it to the
components that need it.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from ..logging import get_logger
from .diff import diff_states
from .models import CaptureSource, CapturedState, StateName, StateRecord, StyleSnapshot
from .rule_matcher import FallbackResult
from .summary import StateSummary, generate_state_summary

logger = get_logger(__name__)

# Checked in order; compound names come before their prefixes.
STATE_SUFFIXES: tuple[tuple[str, StateName], ...] = (
    ("focus-visible", StateName.FOCUS_VISIBLE),
    ("focus-within", StateName.FOCUS_WITHIN),
    ("focusvisible", StateName.FOCUS_VISIBLE),
    ("focuswithin", StateName.FOCUS_WITHIN),
    ("default", StateName.DEFAULT),
    ("hover", StateName.HOVER),
    ("active", StateName.ACTIVE),
    ("focus", StateName.FOCUS),
    ("disabled", StateName.DISABLED),
    ("checked", StateName.CHECKED),
    ("invalid", StateName.INVALID),
)


def infer_state_name(key: str | None) -> StateName | None:
    """
    Best-effort state name from a key suffix (``btn-hover``, ``btn:focus``).

    Case-insensitive. Returns None when no known suffix follows a ``-`` or
    ``:`` separator.
    """
    if not key:
        return None
    normalized = str(key).lower()
    for suffix, state in STATE_SUFFIXES:
        if normalized.endswith(f"-{suffix}") or normalized.endswith(f":{suffix}"):
            return state
    return None


@dataclass
class StoredState:
    """One stored capture."""

    key: str
    selector: str
    styles: StyleSnapshot
    state_name: StateName | None = None
    source: CaptureSource = CaptureSource.LIVE
    # Property -> new value (None removes it), relative to whatever default
    # the record ends up with. Set only for fallback-derived non-default states.
    delta: dict[str, str | None] | None = None
    stored_at: datetime = field(default_factory=datetime.now)

    @property
    def resolved_state(self) -> StateName:
        """Explicit name, else suffix inference, else default."""
        return self.state_name or infer_state_name(self.key) or StateName.DEFAULT

    def copy(self) -> "StoredState":
        return replace(
            self,
            styles=dict(self.styles),
            delta=dict(self.delta) if self.delta is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "selector": self.selector,
            "styles": dict(self.styles),
            "state_name": self.state_name.value if self.state_name else None,
            "source": self.source.value,
            "stored_at": self.stored_at.isoformat(),
            "delta": dict(self.delta) if self.delta is not None else None,
        }


def _coerce_state_name(state_name: StateName | str | None) -> StateName | None:
    if not state_name:
        return None
    try:
        return StateName(state_name)
    except ValueError:
        logger.warning("unknown_state_name", state_name=str(state_name))
        return None


def _selector_and_styles(state: Any) -> tuple[str | None, Mapping[str, str] | None]:
    if isinstance(state, CapturedState):
        return (state.selector, state.styles) if state.ok else (None, None)
    if isinstance(state, Mapping):
        styles = state.get("styles")
        return state.get("selector"), styles if isinstance(styles, Mapping) else None
    return None, None


class StateMatrixStore:
    """Keyed store of captures, folded on demand into selector -> states."""

    def __init__(self) -> None:
        self._entries: dict[str, StoredState] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def store(
        self,
        key: str,
        state: CapturedState | Mapping[str, Any],
        state_name: StateName | str | None = None,
        source: CaptureSource = CaptureSource.LIVE,
        delta: Mapping[str, str | None] | None = None,
    ) -> StoredState | None:
        """
        Insert or replace the entry for ``key`` (last write wins).

        Args:
            key: Entry key; its suffix names the state when ``state_name`` is omitted
            state: A successful CapturedState, or a mapping with selector and styles
            state_name: Explicit state name
            source: Whether the snapshot was captured live or inferred
            delta: Changes relative to the record's default; when given, assembly
                rebuilds the state from the assembled default instead of ``styles``

        Returns:
            The stored entry, or None when ``state`` carries no selector or styles.
        """
        selector, styles = _selector_and_styles(state)
        if not selector or styles is None:
            logger.debug("state_not_stored", key=key, reason="missing selector or styles")
            return None

        entry = StoredState(
            key=key,
            selector=selector,
            styles=dict(styles),
            state_name=_coerce_state_name(state_name),
            source=source,
            delta=dict(delta) if delta is not None else None,
        )
        # Re-inserting moves the key to the end so assembly sees it as newest.
        self._entries.pop(key, None)
        self._entries[key] = entry

        logger.debug(
            "state_stored",
            key=key,
            selector=selector,
            state=entry.resolved_state.value,
            source=source.value,
        )
        return entry.copy()

    def store_fallback(self, result: FallbackResult, key_base: str | None = None) -> list[str]:
        """
        Store every state of a fallback result as fallback-derived entries.

        Keys are ``<key_base or selector>:fallback-<state>``; the state name is
        passed explicitly. Non-default states also carry their changes against
        the fallback default, so that assembly can replay them onto a live
        default. Fallback entries never displace live ones in the assembled
        matrix.

        Returns:
            Keys written.
        """
        if not result.ok or not result.selector:
            return []

        base = key_base or result.selector
        fallback_default = result.states.get(StateName.DEFAULT.value, {})
        keys = []
        for state, styles in result.states.items():
            delta = None
            if state != StateName.DEFAULT.value:
                changes = diff_states(fallback_default, styles).changes
                delta = {prop: change.to_value for prop, change in changes.items()}

            key = f"{base}:fallback-{state}"
            stored = self.store(
                key,
                {"selector": result.selector, "styles": styles},
                state_name=state,
                source=CaptureSource.FALLBACK,
                delta=delta,
            )
            if stored:
                keys.append(key)
        return keys

    def get(self, key: str) -> StoredState | None:
        entry = self._entries.get(key)
        return entry.copy() if entry else None

    def get_all(self) -> dict[str, StoredState]:
        return {key: entry.copy() for key, entry in self._entries.items()}

    def clear(self) -> None:
        self._entries.clear()

    reset = clear

    def assemble_matrix(self) -> dict[str, StateRecord]:
        """
        Fold all entries into one StateRecord per selector.

        Each entry fills only its own state slot. Later entries replace
        earlier ones for the same slot, except that a fallback entry never
        replaces a live one. Entries carrying a delta are rebuilt last, on
        top of the record's final default.
        """
        matrix: dict[str, StateRecord] = {}
        slot_sources: dict[tuple[str, str], CaptureSource] = {}
        pending: dict[tuple[str, str], dict[str, str | None]] = {}

        for entry in self._entries.values():
            state = entry.resolved_state.value
            record = matrix.setdefault(entry.selector, StateRecord(selector=entry.selector))
            slot = (entry.selector, state)

            if (
                slot_sources.get(slot) is CaptureSource.LIVE
                and entry.source is CaptureSource.FALLBACK
            ):
                continue

            record.states[state] = dict(entry.styles)
            slot_sources[slot] = entry.source
            if entry.delta is not None:
                pending[slot] = entry.delta
            else:
                pending.pop(slot, None)

        for (selector, state), delta in pending.items():
            record = matrix[selector]
            styles = dict(record.default or {})
            for prop, value in delta.items():
                if value is None:
                    styles.pop(prop, None)
                else:
                    styles[prop] = value
            record.states[state] = styles

        return matrix

    def generate_summaries(self) -> dict[str, StateSummary]:
        """Summary per assembled selector."""
        return {
            selector: generate_state_summary(record)
            for selector, record in self.assemble_matrix().items()
        }

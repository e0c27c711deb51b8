"""Property-level diff between two style snapshots."""

from collections.abc import Mapping
from typing import Any

from .exceptions import ErrorKind
from .models import PropertyChange, StateDiff


def _styles_of(state: Any) -> Mapping[str, Any] | None:
    """Accept a snapshot mapping or anything exposing ``.styles``."""
    if isinstance(state, Mapping):
        return state
    styles = getattr(state, "styles", None)
    if isinstance(styles, Mapping):
        return styles
    return None


def diff_states(before: Any, after: Any) -> StateDiff:
    """
    Compute the properties whose values differ between two snapshots.

    A property present on one side and missing on the other counts as a
    change; missing or empty values are reported as None. Key order follows
    ``before`` then keys only in ``after``.

    Args:
        before: Baseline snapshot (mapping or object with ``.styles``)
        after: Compared snapshot

    Returns:
        StateDiff; ``ok`` is False with "Invalid state objects" when either
        input is not a snapshot.
    """
    before_styles = _styles_of(before)
    after_styles = _styles_of(after)
    if before_styles is None or after_styles is None:
        return StateDiff(ok=False, error=ErrorKind.INVALID_INPUT.message)

    changes: dict[str, PropertyChange] = {}
    all_props = list(dict.fromkeys([*before_styles.keys(), *after_styles.keys()]))

    for prop in all_props:
        before_value = before_styles.get(prop) or None
        after_value = after_styles.get(prop) or None
        if before_value != after_value:
            changes[prop] = PropertyChange(from_value=before_value, to_value=after_value)

    return StateDiff(ok=True, changes=changes)

"""
Style property allow-lists.

Property names are the camelCase keys of a resolved style declaration
(``getComputedStyle(el).backgroundColor``). Stylesheet rules declare the
kebab-case form, so both spellings are handled here.
"""

import re
from collections.abc import Iterable, Mapping

# Properties read for an element's own snapshot.
STATE_PROPERTIES: tuple[str, ...] = (
    # Colors
    "backgroundColor",
    "backgroundImage",
    "backgroundSize",
    "backgroundPosition",
    "backgroundRepeat",
    "color",
    "borderColor",
    "outlineColor",
    "boxShadow",
    "textShadow",
    # Transforms & effects
    "transform",
    "opacity",
    "filter",
    "backdropFilter",
    # Borders
    "borderWidth",
    "borderStyle",
    "borderRadius",
    "outline",
    "outlineWidth",
    "outlineStyle",
    "outlineOffset",
    # Sizing
    "width",
    "height",
    "padding",
    "margin",
    # Typography
    "fontWeight",
    "textDecoration",
    "textDecorationColor",
    # Cursor
    "cursor",
    # Transitions
    "transition",
    "transitionProperty",
    "transitionDuration",
    "transitionTimingFunction",
    "transitionDelay",
)

# Narrower list for descendants and pseudo-elements; sizing, cursor and
# transition timing are dropped to keep sampled noise down.
SUBTREE_PROPERTIES: tuple[str, ...] = (
    "content",
    "backgroundColor",
    "backgroundImage",
    "backgroundSize",
    "backgroundPosition",
    "backgroundRepeat",
    "color",
    "borderColor",
    "outlineColor",
    "boxShadow",
    "textShadow",
    "transform",
    "opacity",
    "filter",
    "backdropFilter",
    "outline",
    "outlineWidth",
    "outlineStyle",
    "outlineOffset",
    "fontWeight",
    "textDecoration",
    "textDecorationColor",
    "fill",
    "stroke",
)

PLACEHOLDER_VALUES = frozenset({"", "none", "auto", "normal"})

DESCENDANT_PREFIX = "desc:"
PSEUDO_ELEMENTS: tuple[str, ...] = ("::before", "::after")

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


def to_kebab(prop: str) -> str:
    """Convert ``backgroundColor`` to ``background-color``."""
    return _CAMEL_BOUNDARY.sub(r"-\1", prop).lower()


def to_camel(prop: str) -> str:
    """Convert ``background-color`` to ``backgroundColor``."""
    head, *rest = prop.strip().lower().split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def is_placeholder(value: object) -> bool:
    if value is None:
        return True
    return str(value).strip() in PLACEHOLDER_VALUES


def extract_styles(
    raw: Mapping[str, object] | None,
    properties: Iterable[str] = STATE_PROPERTIES,
) -> dict[str, str]:
    """
    Restrict a raw resolved-style map to an allow-list.

    Placeholder values are omitted. Keys not in ``properties`` never pass
    through, whatever the host returned.

    Args:
        raw: Resolved style values keyed by camelCase property name.
        properties: Allow-list to keep.

    Returns:
        Sparse snapshot in allow-list order.
    """
    if not raw:
        return {}

    result: dict[str, str] = {}
    for prop in properties:
        value = raw.get(prop)
        if is_placeholder(value):
            continue
        result[prop] = str(value)
    return result


def split_namespaced_key(key: str) -> tuple[str | None, str]:
    """
    Split ``desc:<path>.<prop>`` or ``::before.<prop>`` into (scope, prop).

    Own-element keys return ``(None, key)``.
    """
    if key.startswith(DESCENDANT_PREFIX) or key.startswith("::"):
        scope, _, prop = key.rpartition(".")
        return scope, prop
    return None, key


def is_allowed_key(key: str) -> bool:
    """Whether a snapshot key belongs to its respective allow-list."""
    scope, prop = split_namespaced_key(key)
    if scope is None:
        return prop in STATE_PROPERTIES
    return prop in SUBTREE_PROPERTIES

"""
Subtree sampling for state capture.

Hover and focus effects often recolor an inner icon or label rather than the
container itself. The sampler scores visible descendants, keeps the top K
and folds their (narrow allow-list) styles into the parent snapshot under
namespaced keys:

- ``desc:<descendant path>.<property>`` for sampled descendants
- ``::before.<property>`` / ``::after.<property>`` for the root's
  pseudo-elements, kept only when they declare ``content``
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..logging import get_logger
from .host import StyleHost
from .models import DescendantNode, StyleSnapshot
from .properties import (
    DESCENDANT_PREFIX,
    PSEUDO_ELEMENTS,
    SUBTREE_PROPERTIES,
    extract_styles,
)

logger = get_logger(__name__)

DEFAULT_MAX_SUBTREE_NODES = 6


@dataclass(frozen=True)
class ScoringWeights:
    """Additive rubric for descendant scoring.

    The values are empirical; override them per sampler rather than editing
    the defaults.
    """

    svg: int = 30
    graphics_primitive: int = 18
    image: int = 16
    interactive: int = 18
    form_control: int = 14
    text_tag: int = 8
    semantic_attribute: int = 12

    text_max: int = 16
    text_chars_per_point: int = 12

    large_area: int = 6000
    large_area_score: int = 10
    medium_area: int = 2000
    medium_area_score: int = 6
    small_area: int = 500
    small_area_score: int = 3

    graphics_tags: frozenset[str] = frozenset(
        {"path", "circle", "rect", "line", "polyline", "polygon"}
    )
    interactive_tags: frozenset[str] = frozenset({"button", "a"})
    form_tags: frozenset[str] = frozenset({"input", "select", "textarea"})
    text_tags: frozenset[str] = frozenset(
        {"h1", "h2", "h3", "h4", "h5", "h6", "p", "span", "strong", "em", "i"}
    )


@dataclass
class SubtreeCandidate:
    """A descendant with its sampling score."""

    node: DescendantNode
    score: int


def score_node(node: DescendantNode, weights: ScoringWeights = ScoringWeights()) -> int:
    """Score a descendant; zero means not worth sampling."""
    tag = node.tag.lower()
    score = 0

    if tag == "svg":
        score += weights.svg
    if tag in weights.graphics_tags:
        score += weights.graphics_primitive
    if tag == "img":
        score += weights.image
    if tag in weights.interactive_tags:
        score += weights.interactive
    if tag in weights.form_tags:
        score += weights.form_control
    if tag in weights.text_tags:
        score += weights.text_tag

    if node.has_role or node.has_aria_label:
        score += weights.semantic_attribute

    text = " ".join(node.text.split())
    if text:
        score += min(weights.text_max, math.ceil(len(text) / weights.text_chars_per_point))

    area = node.area
    if area >= weights.large_area:
        score += weights.large_area_score
    elif area >= weights.medium_area:
        score += weights.medium_area_score
    elif area >= weights.small_area:
        score += weights.small_area_score

    return score


def rank_candidates(
    nodes: Sequence[DescendantNode],
    max_nodes: int = DEFAULT_MAX_SUBTREE_NODES,
    weights: ScoringWeights = ScoringWeights(),
) -> list[SubtreeCandidate]:
    """
    Pick the top ``max_nodes`` visible descendants by score.

    Ties keep document order.
    """
    ranked = []
    for node in nodes:
        if not node.is_visible:
            continue
        score = score_node(node, weights)
        if score <= 0:
            continue
        ranked.append(SubtreeCandidate(node=node, score=score))

    ranked.sort(key=lambda c: c.score, reverse=True)
    return ranked[: max(0, max_nodes)]


def fold_descendants(candidates: Sequence[SubtreeCandidate]) -> StyleSnapshot:
    """Namespace sampled descendant styles as ``desc:<path>.<prop>``."""
    result: StyleSnapshot = {}
    for candidate in candidates:
        styles = extract_styles(candidate.node.styles, SUBTREE_PROPERTIES)
        for prop, value in styles.items():
            result[f"{DESCENDANT_PREFIX}{candidate.node.path}.{prop}"] = value
    return result


def fold_pseudo_element(pseudo: str, raw: dict[str, str]) -> StyleSnapshot:
    """Namespace a pseudo-element's styles, or drop it when it has no content."""
    styles = extract_styles(raw, SUBTREE_PROPERTIES)
    if "content" not in styles:
        return {}
    return {f"{pseudo}.{prop}": value for prop, value in styles.items()}


class SubtreeSampler:
    """Samples descendants and pseudo-elements of a captured element."""

    def __init__(
        self,
        host: StyleHost,
        max_nodes: int = DEFAULT_MAX_SUBTREE_NODES,
        include_pseudo: bool = True,
        weights: ScoringWeights | None = None,
    ):
        """
        Initialize the sampler.

        Args:
            host: Host used to read descendants and pseudo-element styles
            max_nodes: Maximum number of descendants sampled (K)
            include_pseudo: Whether to sample ::before/::after of the root
            weights: Scoring rubric override
        """
        self.host = host
        self.max_nodes = max_nodes
        self.include_pseudo = include_pseudo
        self.weights = weights or ScoringWeights()

    async def sample(self, element: Any) -> StyleSnapshot:
        """Return the namespaced subtree style map for ``element``."""
        result: StyleSnapshot = {}

        if self.include_pseudo:
            for pseudo in PSEUDO_ELEMENTS:
                raw = await self.host.computed_style(element, SUBTREE_PROPERTIES, pseudo)
                result.update(fold_pseudo_element(pseudo, raw))

        nodes = await self.host.descendants(element, SUBTREE_PROPERTIES)
        picked = rank_candidates(nodes, self.max_nodes, self.weights)
        result.update(fold_descendants(picked))

        logger.debug(
            "subtree_sampled",
            descendants=len(nodes),
            sampled=len(picked),
            entries=len(result),
        )
        return result

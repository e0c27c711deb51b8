"""
Style snapshot extraction.

Reads the resolved style of an element restricted to an allow-list. Live
captures additionally fold in the subtree sample so that icon or label
changes inside a container are not lost.
"""

import time
from typing import Any

from ..logging import get_logger
from .host import StyleHost
from .models import CapturedState, StyleSnapshot
from .properties import STATE_PROPERTIES, extract_styles
from .resolver import resolve_target
from .subtree import SubtreeSampler

logger = get_logger(__name__)


class SnapshotExtractor:
    """Captures an element's current style as a sparse snapshot."""

    def __init__(
        self,
        host: StyleHost,
        sampler: SubtreeSampler | None = None,
        include_subtree: bool = True,
    ):
        """
        Initialize the extractor.

        Args:
            host: Host to read styles from
            sampler: Subtree sampler; one with default settings is created if omitted
            include_subtree: Fold sampled descendant styles into captures
        """
        self.host = host
        self.sampler = sampler or SubtreeSampler(host)
        self.include_subtree = include_subtree

    async def own_styles(self, element: Any) -> StyleSnapshot:
        """Full allow-list snapshot of the element itself, no subtree."""
        raw = await self.host.computed_style(element, STATE_PROPERTIES)
        return extract_styles(raw, STATE_PROPERTIES)

    async def capture(self, target: Any) -> CapturedState:
        """
        Capture the current state of ``target``.

        Args:
            target: CSS selector or live element

        Returns:
            CapturedState; ``ok`` is False with "Element not found" when the
            target does not resolve.
        """
        resolution = await resolve_target(self.host, target)
        if not resolution.found:
            logger.debug("snapshot_target_not_found", target=str(target))
            return CapturedState.not_found()

        styles = await self.own_styles(resolution.element)
        if self.include_subtree:
            styles.update(await self.sampler.sample(resolution.element))

        description = resolution.description
        return CapturedState(
            ok=True,
            selector=resolution.selector,
            styles=styles,
            rect=description.identifier.rect if description else None,
            timestamp=time.time(),
        )

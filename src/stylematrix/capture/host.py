"""
Hosting environment for style capture.

The capture components never touch a browser directly; they talk to a
``StyleHost``. ``PlaywrightStyleHost`` implements the protocol against a
live Playwright page by evaluating small read-only scripts. Every method
reports raw facts; filtering, scoring and matching decisions stay in Python.
"""

import logging
from collections.abc import Sequence
from typing import Any, Protocol

from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError

from .exceptions import ResolutionFailure
from .models import (
    BoundingBox,
    DescendantNode,
    ElementAffordances,
    ElementDescription,
    ElementIdentifier,
    StyleRule,
    StylesheetSource,
)
from .properties import to_kebab

logger = logging.getLogger(__name__)


class StyleHost(Protocol):
    """Read access to a rendered document."""

    async def resolve(self, target: Any) -> Any | None:
        """Resolve a selector (or pass through a live element). None if absent."""
        ...

    async def describe(self, element: Any) -> ElementDescription:
        """Identifier and affordances. Raises ResolutionFailure if detached."""
        ...

    async def computed_style(
        self, element: Any, properties: Sequence[str], pseudo: str | None = None
    ) -> dict[str, str]:
        """Resolved values for ``properties`` on the element or one of its pseudo-elements."""
        ...

    async def descendants(
        self, element: Any, properties: Sequence[str]
    ) -> list[DescendantNode]:
        """All element descendants with their raw style values for ``properties``."""
        ...

    async def stylesheets(self, properties: Sequence[str]) -> list[StylesheetSource]:
        """Active stylesheets in document order, style rules only."""
        ...

    async def match_selectors(
        self, element: Any, selectors: Sequence[str]
    ) -> list[bool | None]:
        """Whether the element matches each selector; None for a malformed selector."""
        ...


# Structural path: #id, or up to five tag.class:nth-of-type() hops joined by " > ",
# stopping at the first ancestor that has an id.
_CSS_PATH_JS = """
const cssPath = (el) => {
  if (!el || el.nodeType !== 1) return null;
  if (el.id) return `#${CSS.escape(el.id)}`;
  const parts = [];
  let cur = el;
  let depth = 0;
  while (cur && cur.nodeType === 1 && depth < 5) {
    let part = cur.tagName.toLowerCase();
    if (cur.classList && cur.classList.length) {
      part += Array.from(cur.classList).slice(0, 2).map((c) => `.${CSS.escape(c)}`).join('');
    }
    const parent = cur.parentElement;
    if (parent) {
      const same = Array.from(parent.children).filter((c) => c.tagName === cur.tagName);
      if (same.length > 1) part += `:nth-of-type(${same.indexOf(cur) + 1})`;
    }
    parts.unshift(part);
    if (parent && parent.id) {
      parts.unshift(`#${CSS.escape(parent.id)}`);
      break;
    }
    cur = parent;
    depth++;
  }
  return parts.join(' > ');
};
"""

_DESCRIBE_JS = (
    "(el) => {"
    + _CSS_PATH_JS
    + """
  const r = el.getBoundingClientRect();
  const text = (el.innerText || el.textContent || '').trim().slice(0, 50);
  return {
    selector: cssPath(el),
    rect: { x: r.x, y: r.y, width: r.width, height: r.height },
    tag: el.tagName.toLowerCase(),
    text,
    id: el.id || null,
    classes: el.classList && el.classList.length ? Array.from(el.classList).slice(0, 3) : null,
    role: el.getAttribute('role'),
    ariaLabel: el.getAttribute('aria-label'),
    type: typeof el.type === 'string' ? el.type : null,
    name: typeof el.name === 'string' && el.name ? el.name : null,
    placeholder: el.placeholder || null,
    cursor: getComputedStyle(el).cursor,
    hasClickHandler: !!(el.onclick || el.getAttribute('onclick')),
    tabindex: el.hasAttribute('tabindex') ? el.tabIndex : null,
    disabled: !!el.disabled,
    contentEditable: !!el.isContentEditable,
  };
}"""
)

_COMPUTED_STYLE_JS = """
(el, { props, pseudo }) => {
  const s = getComputedStyle(el, pseudo || null);
  const out = {};
  for (const p of props) {
    const v = s[p];
    if (typeof v === 'string') out[p] = v;
  }
  return out;
}
"""

_DESCENDANTS_JS = (
    "(root, props) => {"
    + _CSS_PATH_JS
    + """
  const nodes = [];
  for (const el of Array.from(root.querySelectorAll('*'))) {
    const r = el.getBoundingClientRect();
    const s = getComputedStyle(el);
    const styles = {};
    for (const p of props) {
      const v = s[p];
      if (typeof v === 'string') styles[p] = v;
    }
    nodes.push({
      path: cssPath(el),
      tag: el.tagName.toLowerCase(),
      rect: { x: r.x, y: r.y, width: r.width, height: r.height },
      display: s.display,
      visibility: s.visibility,
      opacity: s.opacity,
      text: (el.innerText || el.textContent || '').trim().replace(/\\s+/g, ' '),
      hasRole: el.hasAttribute('role'),
      hasAriaLabel: el.hasAttribute('aria-label'),
      styles,
    });
  }
  return nodes;
}"""
)

_STYLESHEETS_JS = """
(props) => {
  const sheets = [];
  for (const sheet of Array.from(document.styleSheets)) {
    const entry = { href: sheet.href || null, rules: [], error: null };
    try {
      for (const rule of Array.from(sheet.cssRules || sheet.rules || [])) {
        if (rule.type !== 1) continue;
        const declarations = {};
        for (const p of props) {
          const v = rule.style.getPropertyValue(p);
          if (v) declarations[p] = v;
        }
        entry.rules.push({ selectorText: rule.selectorText || '', declarations });
      }
    } catch (e) {
      entry.rules = [];
      entry.error = String((e && e.message) || e);
    }
    sheets.push(entry);
  }
  return sheets;
}
"""

_MATCH_SELECTORS_JS = """
(el, selectors) => selectors.map((s) => {
  try {
    return el.matches(s);
  } catch (e) {
    return null;
  }
})
"""


class PlaywrightStyleHost:
    """
    ``StyleHost`` backed by a Playwright page.

    Host-side failures (navigation, detached handles, evaluation errors) are
    logged and degrade to empty results; only ``describe`` signals a
    detached element, via ResolutionFailure.
    """

    def __init__(self, page: Page):
        """
        Initialize the host.

        Args:
            page: Playwright Page to read styles from
        """
        self.page = page

    async def resolve(self, target: Any) -> ElementHandle | None:
        if isinstance(target, ElementHandle):
            return target
        if not isinstance(target, str) or not target.strip():
            return None
        try:
            return await self.page.query_selector(target)
        except PlaywrightError as e:
            logger.debug(f"Selector did not resolve {target!r}: {e}")
            return None

    async def describe(self, element: ElementHandle) -> ElementDescription:
        try:
            data = await element.evaluate(_DESCRIBE_JS)
        except PlaywrightError as e:
            raise ResolutionFailure(f"Element is no longer attached: {e}") from e

        identifier = ElementIdentifier(
            selector=data.get("selector") or "",
            rect=BoundingBox.from_dict(data.get("rect") or {}),
            tag=data.get("tag") or "",
            text=data.get("text") or "",
            id=data.get("id"),
            classes=data.get("classes"),
            role=data.get("role"),
            aria_label=data.get("ariaLabel"),
            type=data.get("type"),
            name=data.get("name"),
            placeholder=data.get("placeholder"),
        )
        affordances = ElementAffordances(
            tag=identifier.tag,
            role=identifier.role,
            cursor=data.get("cursor"),
            has_click_handler=bool(data.get("hasClickHandler")),
            tabindex=data.get("tabindex"),
            disabled=bool(data.get("disabled")),
            content_editable=bool(data.get("contentEditable")),
        )
        return ElementDescription(identifier=identifier, affordances=affordances)

    async def computed_style(
        self,
        element: ElementHandle,
        properties: Sequence[str],
        pseudo: str | None = None,
    ) -> dict[str, str]:
        try:
            return await element.evaluate(
                _COMPUTED_STYLE_JS, {"props": list(properties), "pseudo": pseudo}
            )
        except PlaywrightError as e:
            logger.warning(f"Could not read computed style (pseudo={pseudo}): {e}")
            return {}

    async def descendants(
        self, element: ElementHandle, properties: Sequence[str]
    ) -> list[DescendantNode]:
        try:
            raw_nodes = await element.evaluate(_DESCENDANTS_JS, list(properties))
        except PlaywrightError as e:
            logger.warning(f"Could not enumerate descendants: {e}")
            return []

        nodes = []
        for raw in raw_nodes:
            if not raw.get("path"):
                continue
            rect = raw.get("rect") or {}
            nodes.append(
                DescendantNode(
                    path=raw["path"],
                    tag=raw.get("tag") or "",
                    width=float(rect.get("width") or 0),
                    height=float(rect.get("height") or 0),
                    display=raw.get("display") or "",
                    visibility=raw.get("visibility") or "",
                    opacity=raw.get("opacity") or "1",
                    text=raw.get("text") or "",
                    has_role=bool(raw.get("hasRole")),
                    has_aria_label=bool(raw.get("hasAriaLabel")),
                    styles=raw.get("styles") or {},
                )
            )
        return nodes

    async def stylesheets(self, properties: Sequence[str]) -> list[StylesheetSource]:
        kebab_props = [to_kebab(p) for p in properties]
        try:
            raw_sheets = await self.page.evaluate(_STYLESHEETS_JS, kebab_props)
        except PlaywrightError as e:
            logger.warning(f"Could not enumerate stylesheets: {e}")
            return []

        return [
            StylesheetSource(
                href=raw.get("href"),
                rules=[
                    StyleRule(
                        selector_text=rule.get("selectorText") or "",
                        declarations=rule.get("declarations") or {},
                    )
                    for rule in raw.get("rules") or []
                ],
                error=raw.get("error"),
            )
            for raw in raw_sheets
        ]

    async def match_selectors(
        self, element: ElementHandle, selectors: Sequence[str]
    ) -> list[bool | None]:
        if not selectors:
            return []
        try:
            return await element.evaluate(_MATCH_SELECTORS_JS, list(selectors))
        except PlaywrightError as e:
            logger.warning(f"Could not match selectors against element: {e}")
            return [False] * len(selectors)

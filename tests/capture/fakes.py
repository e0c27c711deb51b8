"""In-memory StyleHost and builders for capture tests."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from stylematrix.capture.exceptions import ResolutionFailure
from stylematrix.capture.models import (
    BoundingBox,
    DescendantNode,
    ElementAffordances,
    ElementDescription,
    ElementIdentifier,
    StyleRule,
    StylesheetSource,
)


@dataclass
class FakeElement:
    """A rendered element as the fake host sees it."""

    selector: str
    tag: str = "div"
    styles: dict[str, str] = field(default_factory=dict)
    pseudo_styles: dict[str, dict[str, str]] = field(default_factory=dict)
    descendants: list[DescendantNode] = field(default_factory=list)
    matches: set[str] = field(default_factory=set)
    role: str | None = None
    cursor: str | None = None
    tabindex: int | None = None
    disabled: bool = False
    attached: bool = True


class FakeStyleHost:
    """StyleHost over fixed elements and stylesheets.

    ``malformed`` lists selectors that ``match_selectors`` reports as
    unparseable.
    """

    def __init__(
        self,
        elements: Sequence[FakeElement] = (),
        sheets: Sequence[StylesheetSource] = (),
        malformed: Sequence[str] = (),
    ):
        self.elements = {e.selector: e for e in elements}
        self.sheets = list(sheets)
        self.malformed = set(malformed)
        self.match_calls: list[list[str]] = []

    def add(self, element: FakeElement) -> FakeElement:
        self.elements[element.selector] = element
        return element

    async def resolve(self, target):
        if isinstance(target, FakeElement):
            return target
        if not isinstance(target, str):
            return None
        return self.elements.get(target)

    async def describe(self, element: FakeElement) -> ElementDescription:
        if not element.attached:
            raise ResolutionFailure(f"{element.selector} is detached")
        identifier = ElementIdentifier(
            selector=element.selector,
            rect=BoundingBox(x=10, y=20, width=120, height=40),
            tag=element.tag,
            role=element.role,
        )
        affordances = ElementAffordances(
            tag=element.tag,
            role=element.role,
            cursor=element.cursor,
            tabindex=element.tabindex,
            disabled=element.disabled,
        )
        return ElementDescription(identifier=identifier, affordances=affordances)

    async def computed_style(self, element: FakeElement, properties, pseudo=None):
        source = element.pseudo_styles.get(pseudo, {}) if pseudo else element.styles
        return {p: source[p] for p in properties if p in source}

    async def descendants(self, element: FakeElement, properties):
        return list(element.descendants)

    async def stylesheets(self, properties):
        return list(self.sheets)

    async def match_selectors(self, element: FakeElement, selectors):
        self.match_calls.append(list(selectors))
        return [None if s in self.malformed else s in element.matches for s in selectors]


def make_node(
    path: str,
    tag: str = "span",
    text: str = "",
    width: float = 20,
    height: float = 20,
    **styles: str,
) -> DescendantNode:
    return DescendantNode(
        path=path,
        tag=tag,
        width=width,
        height=height,
        display="inline",
        visibility="visible",
        opacity="1",
        text=text,
        styles=dict(styles),
    )


def rule(selector_text: str, **declarations: str) -> StyleRule:
    """Rule with kebab-case declarations given as snake_case kwargs."""
    return StyleRule(
        selector_text=selector_text,
        declarations={k.replace("_", "-"): v for k, v in declarations.items()},
    )

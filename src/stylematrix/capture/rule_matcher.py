"""
Static fallback: approximate interaction states from stylesheet rules.

For every style rule that mentions one of the tracked pseudo-classes, the
pseudo-class is stripped to get a residual base selector. If the element
matches the residual selector, the rule's declared properties are overlaid
onto a copy of the element's default snapshot.

Known approximation: matching rules are applied in document order and the
last one wins. Specificity and ``!important`` are not modeled.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..logging import CaptureLogger, get_logger
from .exceptions import ErrorKind, SelectorSyntaxError, SourceAccessDenied
from .host import StyleHost
from .models import StateName, StateRecord, StyleRule, StyleSnapshot, StylesheetSource
from .properties import STATE_PROPERTIES, is_placeholder, to_kebab
from .resolver import resolve_target
from .snapshot import SnapshotExtractor

logger = get_logger(__name__)

# Pseudo-class token -> state it approximates.
PSEUDO_CLASS_STATES: dict[str, StateName] = {
    ":hover": StateName.HOVER,
    ":active": StateName.ACTIVE,
    ":focus": StateName.FOCUS,
    ":focus-visible": StateName.FOCUS_VISIBLE,
    ":focus-within": StateName.FOCUS_WITHIN,
    ":disabled": StateName.DISABLED,
    ":checked": StateName.CHECKED,
    ":invalid": StateName.INVALID,
}

# ":focus" must not match inside ":focus-visible" or ":focus-within".
_TOKEN_PATTERNS: dict[str, re.Pattern[str]] = {
    token: re.compile(re.escape(token) + r"(?![\w-])") for token in PSEUDO_CLASS_STATES
}


class SheetOutcome(Enum):
    SCANNED = "scanned"
    ACCESS_DENIED = "access_denied"


class RuleOutcome(Enum):
    MATCHED = "matched"
    NOT_MATCHED = "not_matched"
    SELECTOR_ERROR = "selector_error"


@dataclass
class RuleScanReport:
    """
    Aggregate outcome of one stylesheet scan.

    ``rules_examined`` counts style rules in readable sheets; ``rules_matched``
    and ``rules_skipped`` count (rule, pseudo-class) checks that matched or
    had a malformed residual selector.
    """

    sheets_scanned: int = 0
    sheets_skipped: int = 0
    rules_examined: int = 0
    rules_matched: int = 0
    rules_skipped: int = 0
    skipped_sheets: list[str | None] = field(default_factory=list)

    def record_sheet(self, sheet: StylesheetSource, outcome: SheetOutcome) -> None:
        if outcome is SheetOutcome.ACCESS_DENIED:
            self.sheets_skipped += 1
            self.skipped_sheets.append(sheet.href)
        else:
            self.sheets_scanned += 1

    def record_rule(self, outcome: RuleOutcome) -> None:
        if outcome is RuleOutcome.MATCHED:
            self.rules_matched += 1
        elif outcome is RuleOutcome.SELECTOR_ERROR:
            self.rules_skipped += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheets_scanned": self.sheets_scanned,
            "sheets_skipped": self.sheets_skipped,
            "rules_examined": self.rules_examined,
            "rules_matched": self.rules_matched,
            "rules_skipped": self.rules_skipped,
            "skipped_sheets": list(self.skipped_sheets),
        }


@dataclass
class FallbackResult:
    """States inferred by rule matching for one element."""

    ok: bool
    selector: str | None = None
    states: dict[str, StyleSnapshot] = field(default_factory=dict)
    report: RuleScanReport = field(default_factory=RuleScanReport)
    method: str = "css-fallback"
    error: str | None = None

    @property
    def state_count(self) -> int:
        return len(self.states)

    @classmethod
    def not_found(cls) -> "FallbackResult":
        return cls(ok=False, error=ErrorKind.NOT_FOUND.message)

    def to_record(self) -> StateRecord:
        return StateRecord(
            selector=self.selector or "",
            states={state: dict(styles) for state, styles in self.states.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"ok": False, "error": self.error}
        return {
            "ok": True,
            "selector": self.selector,
            "method": self.method,
            "states": {state: dict(styles) for state, styles in self.states.items()},
            "state_count": self.state_count,
            "report": self.report.to_dict(),
        }


@dataclass
class _Candidate:
    rule: StyleRule
    state: StateName
    residual: str


def residual_selector(selector_text: str, token: str) -> str | None:
    """
    Strip every occurrence of a pseudo-class token from a selector.

    Returns None when the selector does not use the token. The result may be
    empty or malformed; matching decides that.
    """
    pattern = _TOKEN_PATTERNS.get(token) or re.compile(re.escape(token) + r"(?![\w-])")
    if not pattern.search(selector_text):
        return None
    return pattern.sub("", selector_text).strip()


def overlay_declarations(base: StyleSnapshot, rule: StyleRule) -> StyleSnapshot:
    """
    Overlay a rule's allow-listed declarations onto ``base``.

    Declared properties replace; undeclared ones keep their base value. A
    declared placeholder (``box-shadow: none``) removes the property, since
    snapshots never hold placeholders.
    """
    result = dict(base)
    for prop in STATE_PROPERTIES:
        value = rule.declarations.get(to_kebab(prop))
        if value is None or not value.strip():
            continue
        if is_placeholder(value):
            result.pop(prop, None)
        else:
            result[prop] = value.strip()
    return result


class RuleMatcher:
    """Infers pseudo-class states for an element from stylesheet rules."""

    def __init__(self, host: StyleHost, extractor: SnapshotExtractor | None = None):
        """
        Initialize the matcher.

        Args:
            host: Host providing stylesheets and selector matching
            extractor: Extractor used for the default snapshot
        """
        self.host = host
        self.extractor = extractor or SnapshotExtractor(host)
        self.capture_logger = CaptureLogger(logger)

    def _collect_candidates(
        self, sheets: list[StylesheetSource], report: RuleScanReport
    ) -> list[_Candidate]:
        candidates = []
        for sheet in sheets:
            if not sheet.accessible:
                report.record_sheet(sheet, SheetOutcome.ACCESS_DENIED)
                self.capture_logger.log_skipped_source("sheet", sheet.href, sheet.error or "")
                continue
            report.record_sheet(sheet, SheetOutcome.SCANNED)

            for rule in sheet.rules:
                report.rules_examined += 1
                for token, state in PSEUDO_CLASS_STATES.items():
                    residual = residual_selector(rule.selector_text, token)
                    if residual is not None:
                        candidates.append(_Candidate(rule=rule, state=state, residual=residual))
        return candidates

    async def _match_one(self, element: Any, selector: str) -> bool | None:
        try:
            answers = await self.host.match_selectors(element, [selector])
        except SelectorSyntaxError:
            return None
        return answers[0] if answers else False

    async def _match(self, element: Any, candidates: list[_Candidate]) -> list[RuleOutcome]:
        """Match all residual selectors, in one host round trip when possible."""
        queries = [c.residual for c in candidates if c.residual]
        if not queries:
            raw: list[bool | None] = []
        else:
            try:
                raw = await self.host.match_selectors(element, queries)
            except SelectorSyntaxError:
                # One bad selector poisoned the batch; retry individually.
                raw = [await self._match_one(element, q) for q in queries]
        answers = iter(raw)

        outcomes = []
        for candidate in candidates:
            if not candidate.residual:
                outcomes.append(RuleOutcome.SELECTOR_ERROR)
                continue
            answer = next(answers, False)
            if answer is None:
                outcomes.append(RuleOutcome.SELECTOR_ERROR)
            elif answer:
                outcomes.append(RuleOutcome.MATCHED)
            else:
                outcomes.append(RuleOutcome.NOT_MATCHED)
        return outcomes

    async def extract_states(self, target: Any) -> FallbackResult:
        """
        Approximate every tracked state of ``target`` from stylesheet rules.

        Args:
            target: CSS selector or live element

        Returns:
            FallbackResult with ``default`` plus one snapshot per state that
            at least one rule matched. Never raises for unreadable sheets or
            malformed selectors; those are counted in ``report``.
        """
        resolution = await resolve_target(self.host, target)
        if not resolution.found:
            return FallbackResult.not_found()

        element = resolution.element
        default = await self.extractor.own_styles(element)
        states: dict[str, StyleSnapshot] = {StateName.DEFAULT.value: default}
        report = RuleScanReport()

        try:
            sheets = await self.host.stylesheets(STATE_PROPERTIES)
        except SourceAccessDenied as e:
            sheets = [StylesheetSource(href=e.href, error=e.reason)]
        candidates = self._collect_candidates(sheets, report)
        outcomes = await self._match(element, candidates)

        for candidate, outcome in zip(candidates, outcomes):
            report.record_rule(outcome)
            if outcome is RuleOutcome.SELECTOR_ERROR:
                self.capture_logger.log_skipped_source(
                    "rule", candidate.rule.selector_text, "invalid residual selector"
                )
                continue
            if outcome is not RuleOutcome.MATCHED:
                continue
            key = candidate.state.value
            states[key] = overlay_declarations(states.get(key, default), candidate.rule)

        logger.debug("rule_scan_completed", selector=resolution.selector, **report.to_dict())

        return FallbackResult(
            ok=True,
            selector=resolution.selector,
            states=states,
            report=report,
        )

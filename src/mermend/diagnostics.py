"""Interpretation of Mermaid renderer error messages.

The renderer reports parse errors as terse token expectations ("Expecting
'SQE', got 'PS'") with a line number that is often off. This module turns
such a message into something actionable: the line that most likely
caused it, a known error pattern with an explanation, and whether the
repair engine would change the document.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import regex
from pydantic import BaseModel, Field

from mermend.repair.blocks import opens_block
from mermend.repair.engine import RepairEngine, issues_from_fixes
from mermend.repair.models import Fix, FixType, Issue

logger = logging.getLogger(__name__)

_RENDER_ID_RE = regex.compile(r"mermaid-\d+-\d+")
_BLANK_RUN_RE = regex.compile(r"\n{2,}")
_FRAGMENT_RE = regex.compile(r"\.\.\.([^\n]{5,60})")
_DELIMITER_TOKEN_RE = regex.compile(r"Expecting.*('SQE'|'PE'|'PS'|'STR')|got '(PS|STR)'")
_REPORTED_LINE_RE = regex.compile(r"line (\d+)", regex.IGNORECASE)
_PAREN_IN_NODE_RE = regex.compile(r"\w+\s*(?:\[[^\]]*\([^\]]*\)[^\]]*\]|\{[^\}]*\([^\}]*\)[^\}]*\})")
_END_LINE_RE = regex.compile(r"^\s*end\s*;?\s*$")

NODE_ISSUE_TYPES = frozenset(
    {
        FixType.UNQUOTED_SPECIAL_CHARS,
        FixType.EDGE_LABEL_CONTENT,
        FixType.SUBGRAPH_TITLE,
        FixType.MISPLACED_CLASS,
        FixType.LEAKED_CONTENT,
    }
)

PROXIMITY_RANGE = 10
FRAGMENT_PREFIX_LENGTH = 15


@dataclass(frozen=True)
class ErrorPattern:
    """A recognizable family of renderer errors."""

    name: str
    message_pattern: str
    detect: Callable[[str, list[Issue]], bool]
    title: str
    explanation: str
    suggestion: str
    can_auto_fix: bool

    def matches(self, message: str, code: str, issues: list[Issue]) -> bool:
        if not regex.search(self.message_pattern, message, flags=regex.IGNORECASE):
            return False
        return self.detect(code, issues)


def _has_issue(types: frozenset[FixType]) -> Callable[[str, list[Issue]], bool]:
    def detect(code: str, issues: list[Issue]) -> bool:
        return any(issue.type in types for issue in issues)

    return detect


def _has_unbalanced_quotes(code: str, issues: list[Issue]) -> bool:
    return any(line.count('"') % 2 == 1 for line in code.split("\n"))


def _has_unclosed_block(code: str, issues: list[Issue]) -> bool:
    lines = code.split("\n")
    opens = sum(1 for line in lines if opens_block(line))
    closes = sum(1 for line in lines if _END_LINE_RE.match(line))
    return opens > closes


ERROR_PATTERNS: tuple[ErrorPattern, ...] = (
    ErrorPattern(
        name="special_characters",
        message_pattern=r"Expecting.*('SQE'|'PE'|'PS'|'DOUBLECIRCLEEND'|'STADIUMEND'|'STR')|got '(PS|STR)'",
        detect=_has_issue(NODE_ISSUE_TYPES),
        title="Special characters in node text",
        explanation=(
            'Parentheses or double quotes inside a node label are read by Mermaid '
            "as shape delimiters or string boundaries."
        ),
        suggestion="Run auto-fix to wrap the affected labels in quotes and escape inner quotes.",
        can_auto_fix=True,
    ),
    ErrorPattern(
        name="trailing_syntax",
        message_pattern=r"got 'COLON'|Expecting.*'COLON'",
        detect=_has_issue(frozenset({FixType.TRAILING_SYNTAX})),
        title="Text after a node's closing bracket",
        explanation="Mermaid has no syntax for annotations such as A[Text]:(note) after a node.",
        suggestion="Run auto-fix to drop the annotation and keep any :::class suffix.",
        can_auto_fix=True,
    ),
    ErrorPattern(
        name="orphan_end",
        message_pattern=r"got 'end'|Unexpected.*end",
        detect=_has_issue(frozenset({FixType.ORPHAN_END})),
        title="'end' without an open block",
        explanation="An 'end' keyword appears where no subgraph or block is open.",
        suggestion="Run auto-fix to turn the stray 'end' into a comment.",
        can_auto_fix=True,
    ),
    ErrorPattern(
        name="unbalanced_quotes",
        message_pattern=r"Expecting.*'ALPHA'|Expecting.*'COLON'",
        detect=_has_unbalanced_quotes,
        title="Unbalanced quotes",
        explanation="A quote is left open or quotes are nested incorrectly.",
        suggestion="Check that every quote on the reported line is closed.",
        can_auto_fix=False,
    ),
    ErrorPattern(
        name="unclosed_subgraph",
        message_pattern=r"subgraph|Expecting.*'end'",
        detect=_has_unclosed_block,
        title="Unclosed subgraph",
        explanation="There are more 'subgraph' declarations than closing 'end' keywords.",
        suggestion="Add an 'end' for every open subgraph.",
        can_auto_fix=False,
    ),
)


class ErrorLocation(BaseModel):
    """Line most likely responsible for a renderer error."""

    line_number: int = Field(..., ge=1)
    content: str


class RenderErrorReport(BaseModel):
    """Structured explanation of a renderer error."""

    message: str
    location: ErrorLocation | None = None
    pattern: str | None = None
    title: str
    explanation: str | None = None
    suggestion: str | None = None
    issues: list[Issue] = Field(default_factory=list)
    can_auto_fix: bool = False
    auto_fix_preview: list[Fix] = Field(default_factory=list)


def clean_error_message(message: str) -> str:
    """Replace renderer element ids and collapse blank lines."""
    return _BLANK_RUN_RE.sub("\n", _RENDER_ID_RE.sub("diagram", message))


def locate_error_line(
    message: str, code: str, issues: list[Issue] | None = None
) -> ErrorLocation | None:
    """Find the source line a renderer error most likely refers to.

    Three strategies are tried in order:

    1. The renderer quotes the failing text after "...": the first line
       containing the start of that fragment wins.
    2. For delimiter-token errors, the first line the analyzer flags for
       node, label or title content.
    3. Around a reported "line N", the nearest line (within 10 lines) with
       parentheses inside a box or rhombus node; otherwise line N itself.

    Args:
        message: Raw renderer error message
        code: Diagram source that produced it
        issues: Analyzer issues for the code, computed when omitted

    Returns:
        ErrorLocation, or None when nothing points at a line
    """
    lines = code.split("\n")

    fragment = _FRAGMENT_RE.search(message)
    if fragment:
        prefix = fragment.group(1).strip()[:FRAGMENT_PREFIX_LENGTH]
        if prefix:
            for index, line in enumerate(lines):
                if prefix in line:
                    return ErrorLocation(line_number=index + 1, content=line)

    if _DELIMITER_TOKEN_RE.search(message):
        if issues is None:
            issues = RepairEngine().analyze(code)
        for issue in issues:
            if issue.type in NODE_ISSUE_TYPES and issue.line <= len(lines):
                return ErrorLocation(line_number=issue.line, content=lines[issue.line - 1])

    reported = _REPORTED_LINE_RE.search(message)
    if reported:
        line_number = int(reported.group(1))
        for offset in range(PROXIMITY_RANGE + 1):
            for direction in (1, -1):
                index = line_number - 1 + offset * direction
                if 0 <= index < len(lines) and _PAREN_IN_NODE_RE.search(lines[index]):
                    return ErrorLocation(line_number=index + 1, content=lines[index])
        if 1 <= line_number <= len(lines):
            return ErrorLocation(line_number=line_number, content=lines[line_number - 1])

    return None


def parse_render_error(message: str, code: str, engine: RepairEngine | None = None) -> RenderErrorReport:
    """Explain a renderer error against the source that produced it.

    Args:
        message: Raw renderer error message
        code: Diagram source
        engine: Repair engine to use, a default one when omitted

    Returns:
        RenderErrorReport with the location, matched pattern and auto-fix preview
    """
    engine = engine or RepairEngine()
    result = engine.fix(code)
    issues = issues_from_fixes(result.fixes)
    location = locate_error_line(message, code, issues)

    matched = None
    for pattern in ERROR_PATTERNS:
        if pattern.matches(message, code, issues):
            matched = pattern
            break
    logger.debug(f"Render error matched pattern: {matched.name if matched else 'none'}")

    return RenderErrorReport(
        message=clean_error_message(message),
        location=location,
        pattern=matched.name if matched else None,
        title=matched.title if matched else "Mermaid syntax error",
        explanation=matched.explanation if matched else None,
        suggestion=matched.suggestion if matched else None,
        issues=issues,
        can_auto_fix=result.has_changes,
        auto_fix_preview=result.fixes,
    )

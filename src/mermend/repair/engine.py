"""Repair orchestration.

The engine folds a fixed sequence of passes over a document. Every pass is a
pure function of ``(line, line_number)`` returning the rewritten line and
the fixes it made, so the engine only threads results from one pass to the
next and collects the change log.

Order of work:

1. Orphan `end` keywords are commented out over the whole document.
2. The diagram type is detected from the declaration line.
3. Each line is classified. Comments, blank lines, front matter, the
   declaration and structural keywords pass through untouched. Styling
   statements the diagram type does not support are deleted; supported
   linkStyle statements get the hex color workaround.
4. Subgraph declarations get their title quoted.
5. Every other line goes through trailing-syntax stripping, edge label
   delimiter and content repair, node repair, and class-suffix spacing.
"""

import logging
from collections.abc import Callable
from functools import partial

import regex

from mermend.config.schema import RepairConfig
from mermend.repair.blocks import close_orphan_blocks
from mermend.repair.classes import normalize_class_spacing
from mermend.repair.diagram_type import (
    StyleFamily,
    detect_diagram_type,
    find_declaration_line,
    front_matter_length,
    supports_family,
    uses_node_syntax,
)
from mermend.repair.directives import (
    SUBGRAPH_TITLE_RE,
    classify_directive,
    drop_unsupported_directive,
    fix_link_style_hex,
    fix_subgraph_title,
)
from mermend.repair.edges import fix_edge_label_content, fix_edge_label_delimiters
from mermend.repair.models import DiagramType, Fix, FixResult, FixType, Issue
from mermend.repair.shapes import detect_special_shapes as _detect_special_shapes
from mermend.repair.shapes import repair_nodes
from mermend.repair.trailing import strip_trailing_syntax

logger = logging.getLogger(__name__)

LinePass = Callable[[str, int], tuple[str, list[Fix]]]

_STRUCTURAL_RE = regex.compile(
    r"^\s*(?:direction\s|end\s*;?\s*$|click\s|accTitle\b|accDescr\b)"
)

FIX_DESCRIPTIONS: dict[FixType, str] = {
    FixType.ORPHAN_END: "'end' without a matching open block",
    FixType.UNSUPPORTED_STYLE_DIRECTIVE: "Styling statement not supported by this diagram type",
    FixType.UNSUPPORTED_CLASS_ASSIGN: "Class assignment not supported by this diagram type",
    FixType.LINKSTYLE_HEX_COLOR: "linkStyle ending in a hex color",
    FixType.TRAILING_SYNTAX: "Annotation after a node's closing delimiter",
    FixType.EDGE_LABEL_DELIMITER: "Edge label closed with the wrong delimiter",
    FixType.EDGE_LABEL_CONTENT: "Edge label with special characters needs quotes",
    FixType.SUBGRAPH_TITLE: "Subgraph title with special characters needs quotes",
    FixType.UNQUOTED_SPECIAL_CHARS: "Node text with special characters needs quotes",
    FixType.MISPLACED_CLASS: "Class suffix written inside the node text",
    FixType.LEAKED_CONTENT: "Node text continues past the closing delimiter",
    FixType.CLASS_SUFFIX_SPACING: "Whitespace between a node and its class suffix",
}


class RepairEngine:
    """Detects and repairs broken Mermaid syntax.

    The engine is stateless between calls; one instance can repair any
    number of documents.

    Example:
        >>> engine = RepairEngine()
        >>> engine.fix("A[Hello (World)]").code
        'A["Hello (World)"]'
    """

    def __init__(self, config: RepairConfig | None = None) -> None:
        """Initialize the engine.

        Args:
            config: Repair settings, defaults when omitted
        """
        self.config = config or RepairConfig()

    def fix(self, code: str) -> FixResult:
        """Repair a document.

        Args:
            code: Mermaid source, lines separated by newlines

        Returns:
            FixResult with the corrected code and every fix applied
        """
        lines, fixes = close_orphan_blocks(code.split("\n"))
        diagram_type = detect_diagram_type(lines)
        declaration = None
        if diagram_type is not DiagramType.UNKNOWN:
            declaration = find_declaration_line(lines)
        front_matter = front_matter_length(lines)
        node_syntax = uses_node_syntax(diagram_type)
        line_passes = self._line_passes(diagram_type)

        output = []
        for index, line in enumerate(lines):
            number = index + 1
            if index < front_matter or index == declaration:
                output.append(line)
                continue

            fixed, found = self._repair_line(line, number, diagram_type, node_syntax, line_passes)
            fixes.extend(found)
            if fixed is not None:
                output.append(fixed)

        for fix in fixes:
            logger.debug(f"Line {fix.line}: {fix.original!r} -> {fix.fixed!r}")
        if fixes:
            logger.info(f"Applied {len(fixes)} fix(es) to {diagram_type.value} diagram")

        return FixResult(code="\n".join(output), fixes=fixes, diagram_type=diagram_type)

    def analyze(self, code: str) -> list[Issue]:
        """Report what `fix` would change, without returning rewritten code.

        Args:
            code: Mermaid source

        Returns:
            One Issue per fix the engine would apply, in document order
        """
        return issues_from_fixes(self.fix(code).fixes)

    def _line_passes(self, diagram_type: DiagramType) -> tuple[LinePass, ...]:
        config = self.config
        timeout = config.regex_timeout
        return (
            partial(strip_trailing_syntax, timeout=timeout),
            partial(
                fix_edge_label_delimiters,
                max_passes=config.edge_label_passes,
                timeout=timeout,
            ),
            partial(
                fix_edge_label_content,
                reserved_chars=config.quote_reserved_chars,
                timeout=timeout,
            ),
            partial(
                repair_nodes,
                inline_classes=supports_family(diagram_type, StyleFamily.INLINE_CLASS),
                reserved_chars=config.quote_reserved_chars,
                max_passes=config.node_passes,
                timeout=timeout,
            ),
            partial(normalize_class_spacing, timeout=timeout),
        )

    def _repair_line(
        self,
        line: str,
        number: int,
        diagram_type: DiagramType,
        node_syntax: bool,
        line_passes: tuple[LinePass, ...],
    ) -> tuple[str | None, list[Fix]]:
        """Repair one line; a None line means the line is deleted."""
        stripped = line.strip()
        if not stripped or stripped.startswith("%%"):
            return line, []

        family = classify_directive(line)
        if family is not None:
            kept, fixes = drop_unsupported_directive(line, number, diagram_type)
            if kept is not None and family is StyleFamily.LINK_STYLE:
                return fix_link_style_hex(kept, number)
            return kept, fixes

        if not node_syntax or _STRUCTURAL_RE.match(line):
            return line, []

        if SUBGRAPH_TITLE_RE.match(line):
            return self._run_pass(
                partial(fix_subgraph_title, reserved_chars=self.config.quote_reserved_chars),
                line,
                number,
            )

        fixes: list[Fix] = []
        for line_pass in line_passes:
            line, found = self._run_pass(line_pass, line, number)
            fixes.extend(found)
        return line, fixes

    def _run_pass(self, line_pass: LinePass, line: str, number: int) -> tuple[str, list[Fix]]:
        try:
            return line_pass(line, number)
        except TimeoutError:
            logger.warning(f"Line {number}: pattern matching timed out, pass skipped")
            return line, []


def issues_from_fixes(fixes: list[Fix]) -> list[Issue]:
    """Describe fixes as analysis issues, ordered by line."""
    issues = [
        Issue(
            line=fix.line,
            type=fix.type,
            content=fix.original,
            description=FIX_DESCRIPTIONS[fix.type],
        )
        for fix in fixes
        if fix.type is not None
    ]
    return sorted(issues, key=lambda issue: issue.line)


def auto_fix_mermaid_code(code: str, config: RepairConfig | None = None) -> FixResult:
    """Repair a Mermaid document.

    Args:
        code: Mermaid source
        config: Optional repair settings

    Returns:
        FixResult with ``code``, ``fixes``, ``has_changes`` and ``diagram_type``

    Example:
        >>> result = auto_fix_mermaid_code("graph TD\\nA(Text (with parens)):::hot")
        >>> result.code.splitlines()[1]
        'A("Text (with parens)"):::hot'
    """
    return RepairEngine(config).fix(code)


def analyze_code(code: str, config: RepairConfig | None = None) -> list[Issue]:
    """List the problems auto-fix would repair, without rewriting anything."""
    return RepairEngine(config).analyze(code)


def detect_special_shapes(code: str) -> list[str]:
    """List the special node shapes (circle, stadium, ...) used in a document."""
    return _detect_special_shapes(code)

"""Node shape scanners.

Every node shape is one row of `NODE_SHAPES`. A single routine walks the
table in priority order, so longer delimiters claim their span before a
shorter delimiter could match inside it. Each recognized node is then
handed to the misplaced-class extractor, the content-leak merger and, as a
last resort, plain quoting.
"""

import logging
from dataclasses import dataclass

import regex

from mermend.repair.classes import CLASS_SUFFIX_PATTERN, extract_misplaced_classes
from mermend.repair.leaks import find_leaked_content
from mermend.repair.lexing import (
    REGEX_TIMEOUT,
    find_quote_spans,
    in_quote_span,
    nesting_depths,
    replace_spans,
)
from mermend.repair.models import Fix, FixType, Occurrence, OccurrenceKind
from mermend.repair.quoting import has_problematic_content, is_fully_quoted, safe_quote, unquote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeShape:
    """Declarative description of one node shape.

    Attributes:
        kind: Occurrence kind reported for this shape
        open: Opening delimiter written right after the node id
        close: Accepted closing delimiters, first found wins
        not_followed_by: Characters that may not follow the opener (they
            belong to a more specific shape)
        balanced: Find the close by counting nested parentheses
        first_close_fallback: Retry with the first close when the parens
            inside never balance
        tight: No whitespace allowed between id and opener
    """

    kind: OccurrenceKind
    open: str
    close: tuple[str, ...]
    not_followed_by: str = ""
    balanced: bool = False
    first_close_fallback: bool = False
    tight: bool = False

    @property
    def candidate_pattern(self) -> str:
        gap = "" if self.tight else r"[ \t]*"
        pattern = r"(?<![\w</])(?P<id>\w+)(?P<gap>" + gap + ")" + regex.escape(self.open)
        if self.not_followed_by:
            pattern += "(?![" + regex.escape(self.not_followed_by) + "])"
        return pattern


# Priority order: most specific delimiter first
NODE_SHAPES: tuple[NodeShape, ...] = (
    NodeShape(
        OccurrenceKind.DOUBLE_CIRCLE_NODE, "(((", (")))",), balanced=True, first_close_fallback=True
    ),
    NodeShape(OccurrenceKind.STADIUM_NODE, "([", ("])",)),
    NodeShape(OccurrenceKind.SUBROUTINE_NODE, "[[", ("]]",)),
    NodeShape(OccurrenceKind.CYLINDER_NODE, "[(", (")]",)),
    NodeShape(
        OccurrenceKind.CIRCLE_NODE,
        "((",
        ("))",),
        not_followed_by="(",
        balanced=True,
        first_close_fallback=True,
    ),
    NodeShape(OccurrenceKind.HEXAGON_NODE, "{{", ("}}",)),
    NodeShape(OccurrenceKind.TRAPEZOID_NODE, "[/", ("/]", "\\]")),
    NodeShape(OccurrenceKind.TRAPEZOID_NODE, "[\\", ("\\]", "/]")),
    NodeShape(OccurrenceKind.FLAG_NODE, ">", ("]",), tight=True),
    NodeShape(OccurrenceKind.BOX_NODE, "[", ("]",), not_followed_by="[(/\\"),
    NodeShape(OccurrenceKind.RHOMBUS_NODE, "{", ("}",), not_followed_by="{"),
    NodeShape(OccurrenceKind.ROUND_NODE, "(", (")",), not_followed_by="([", balanced=True),
)

_CANDIDATE_RES = {shape: regex.compile(shape.candidate_pattern) for shape in NODE_SHAPES}
_CLASS_SUFFIX_RE = regex.compile(CLASS_SUFFIX_PATTERN)

SPECIAL_SHAPE_NAMES = {
    OccurrenceKind.DOUBLE_CIRCLE_NODE: "double circle",
    OccurrenceKind.STADIUM_NODE: "stadium",
    OccurrenceKind.SUBROUTINE_NODE: "subroutine",
    OccurrenceKind.CYLINDER_NODE: "cylinder",
    OccurrenceKind.CIRCLE_NODE: "circle",
    OccurrenceKind.HEXAGON_NODE: "hexagon",
    OccurrenceKind.TRAPEZOID_NODE: "trapezoid",
    OccurrenceKind.FLAG_NODE: "flag",
}


@dataclass(frozen=True)
class NodeMatch(Occurrence):
    """A recognized node with its parts split out."""

    node_id: str
    gap: str
    open: str
    content: str
    close: str
    suffix: str


def _scan_for_close(
    line: str, position: int, shape: NodeShape, quote_aware: bool, balanced: bool
) -> tuple[int, str] | None:
    depth = 0
    in_quote = False
    for index in range(position, len(line)):
        char = line[index]
        if quote_aware and char == '"':
            in_quote = not in_quote
            continue
        if in_quote:
            continue
        if depth == 0:
            for close in shape.close:
                if line.startswith(close, index):
                    return index, close
        if balanced:
            if char == "(":
                depth += 1
            elif char == ")" and depth > 0:
                depth -= 1
    return None


def _find_close(line: str, position: int, shape: NodeShape) -> tuple[int, str] | None:
    """Find the closing delimiter of a node whose content starts at position.

    Quotes are honored first when the content opens with a quote (or for
    paren shapes, whose balance must skip quoted parens); an unbalanced quote
    falls back to a plain scan. Circles whose inner parens never balance fall
    back to the first closing delimiter.
    """
    if shape.balanced or line[position:].lstrip().startswith('"'):
        found = _scan_for_close(line, position, shape, quote_aware=True, balanced=shape.balanced)
        if found is not None:
            return found
    found = _scan_for_close(line, position, shape, quote_aware=False, balanced=shape.balanced)
    if found is None and shape.first_close_fallback:
        found = _scan_for_close(line, position, shape, quote_aware=False, balanced=False)
    return found


def scan_nodes(line: str, timeout: float = REGEX_TIMEOUT) -> list[NodeMatch]:
    """Recognize every node definition on a line.

    Candidates are skipped when they start inside a quoted span, start inside
    another node's brackets, or overlap a node already accepted by a
    higher-priority shape.

    Args:
        line: A single line of diagram source
        timeout: Regex timeout in seconds

    Returns:
        Non-overlapping nodes in left-to-right order
    """
    spans = find_quote_spans(line)
    depths = nesting_depths(line, spans)
    accepted: list[NodeMatch] = []

    for shape in NODE_SHAPES:
        for candidate in _CANDIDATE_RES[shape].finditer(line, timeout=timeout):
            start = candidate.start()
            if in_quote_span(start, spans) or depths[start] > 0:
                continue

            content_start = candidate.end()
            found = _find_close(line, content_start, shape)
            if found is None:
                continue
            close_at, close = found
            content = line[content_start:close_at]
            if not content.strip():
                continue

            end = close_at + len(close)
            suffix_match = _CLASS_SUFFIX_RE.match(line, end, timeout=timeout)
            suffix = suffix_match.group() if suffix_match else ""
            end += len(suffix)

            if any(node.overlaps(start, end) for node in accepted):
                continue
            accepted.append(
                NodeMatch(
                    text=line[start:end],
                    start=start,
                    end=end,
                    kind=shape.kind,
                    node_id=candidate.group("id"),
                    gap=candidate.group("gap"),
                    open=shape.open,
                    content=content,
                    close=close,
                    suffix=suffix,
                )
            )

    return sorted(accepted, key=lambda node: node.start)


def _repair_node(
    line: str,
    node: NodeMatch,
    others: list[NodeMatch],
    inline_classes: bool,
    reserved_chars: bool,
    timeout: float,
) -> tuple[int, str, FixType] | None:
    """Work out the rewrite for one node, if it needs one.

    Returns:
        (end offset of the rewritten span, replacement, fix type) or None
    """
    content = node.content
    classes = node.suffix
    end = node.end
    fix_type = None

    if inline_classes:
        extraction = extract_misplaced_classes(content, reserved_chars)
        if extraction.was_fixed:
            content = extraction.clean_content
            classes = extraction.extracted_classes + classes
            fix_type = FixType.MISPLACED_CLASS

    if not node.suffix:
        leak = find_leaked_content(line, node.end, timeout)
        if leak is not None and not any(
            other is not node and other.overlaps(node.end, leak.end) for other in others
        ):
            content = safe_quote(unquote(content) + leak.text)
            classes += leak.classes
            end = leak.end
            fix_type = FixType.LEAKED_CONTENT

    if fix_type is None:
        if is_fully_quoted(content) or not has_problematic_content(content, reserved_chars):
            return None
        content = safe_quote(content)
        fix_type = FixType.UNQUOTED_SPECIAL_CHARS

    replacement = f"{node.node_id}{node.gap}{node.open}{content}{node.close}{classes}"
    if replacement == line[node.start:end]:
        return None
    return end, replacement, fix_type


def _repair_nodes_once(
    line: str,
    line_number: int,
    inline_classes: bool,
    reserved_chars: bool,
    timeout: float,
) -> tuple[str, list[Fix]]:
    nodes = scan_nodes(line, timeout)
    edits = []
    fixes = []
    for node in nodes:
        repaired = _repair_node(line, node, nodes, inline_classes, reserved_chars, timeout)
        if repaired is None:
            continue
        end, replacement, fix_type = repaired
        if any(node.start < edit_end and edit_start < end for edit_start, edit_end, _ in edits):
            continue
        edits.append((node.start, end, replacement))
        fixes.append(
            Fix(line=line_number, original=line[node.start:end], fixed=replacement, type=fix_type)
        )
    return replace_spans(line, edits), fixes


def repair_nodes(
    line: str,
    line_number: int,
    inline_classes: bool = True,
    reserved_chars: bool = True,
    max_passes: int = 3,
    timeout: float = REGEX_TIMEOUT,
) -> tuple[str, list[Fix]]:
    """Quote, merge and re-class node definitions on a line.

    The scan is repeated while it keeps producing fixes, up to max_passes,
    because a rewrite can change the quote layout the next scan relies on.

    Args:
        line: A single line of diagram source
        line_number: 1-based line number used in the fix records
        inline_classes: Whether `:::class` suffixes are legal here
        reserved_chars: Treat "%" and "#" as problematic
        max_passes: Upper bound on scan repetitions
        timeout: Regex timeout in seconds

    Returns:
        Tuple of (rewritten line, fixes in application order)
    """
    fixes: list[Fix] = []
    for _ in range(max_passes):
        line, found = _repair_nodes_once(line, line_number, inline_classes, reserved_chars, timeout)
        if not found:
            break
        fixes.extend(found)
        logger.debug(f"Line {line_number}: repaired {len(found)} node(s)")
    return line, fixes


def detect_special_shapes(code: str, timeout: float = REGEX_TIMEOUT) -> list[str]:
    """List the special node shapes used anywhere in a document.

    Args:
        code: Diagram source

    Returns:
        Shape names in table priority order, without duplicates
    """
    found: set[OccurrenceKind] = set()
    for line in code.split("\n"):
        for node in scan_nodes(line, timeout):
            found.add(node.kind)
    return [name for kind, name in SPECIAL_SHAPE_NAMES.items() if kind in found]

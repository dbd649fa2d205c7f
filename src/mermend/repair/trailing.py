"""Removal of annotations written after a node's closing delimiter.

Mermaid has no syntax for `A[Text]:(note)` or `A{Q}:note:::cls`; the colon
text is dropped and any class suffix is kept.
"""

import regex

from mermend.repair.lexing import REGEX_TIMEOUT, replace_spans
from mermend.repair.models import Fix, FixType
from mermend.repair.shapes import scan_nodes

# One or more `:annotation` segments, anchored at a node end
_TRAILING_RE = regex.compile(
    r"[ \t]*"
    r"(?P<junk>(?::(?!:)(?:[^\s:()\[\]{}=-]*\([^)]*\)|[^\s:()\[\]{}=-]+)[^\s:\[\]{}=-]*)+)"
    r"(?P<classes>[ \t]*:::[\w-]+)?"
    r"(?=\s|$|;|&|--|==|-\.)"
)


def strip_trailing_syntax(
    line: str, line_number: int, timeout: float = REGEX_TIMEOUT
) -> tuple[str, list[Fix]]:
    """Drop colon annotations that follow a closing node delimiter.

    Only the end of a node found by the shape scanner counts as a closing
    delimiter, so parens inside an annotation and colons inside labels are
    never taken for one. Multiple annotated nodes on a line are each
    stripped.

    Args:
        line: A single line of diagram source
        line_number: 1-based line number used in the fix records
        timeout: Regex timeout in seconds

    Returns:
        Tuple of (rewritten line, one fix per removed annotation)
    """
    edits = []
    fixes = []
    for node in scan_nodes(line, timeout):
        match = _TRAILING_RE.match(line, node.end, timeout=timeout)
        if match is None:
            continue
        close_start = node.end - len(node.suffix) - len(node.close)
        kept = line[close_start:node.end] + (match.group("classes") or "").strip()
        edits.append((close_start, match.end(), kept))
        fixes.append(
            Fix(
                line=line_number,
                original=line[close_start:match.end()],
                fixed=kept,
                type=FixType.TRAILING_SYNTAX,
            )
        )
    return replace_spans(line, edits), fixes

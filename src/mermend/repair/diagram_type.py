"""Diagram type detection and per-type capability tables."""

from enum import Enum

from mermend.repair.models import DiagramType


class StyleFamily(str, Enum):
    """Families of styling syntax whose legality depends on the diagram type."""

    STYLE = "style"
    CLASS_DEF = "classDef"
    CLASS_ASSIGN = "class"
    LINK_STYLE = "linkStyle"
    INLINE_CLASS = "inline_class"


# Declaration keywords, matched case-insensitively as prefixes in this order
DIAGRAM_KEYWORDS: tuple[tuple[str, DiagramType], ...] = (
    ("flowchart", DiagramType.FLOWCHART),
    ("graph", DiagramType.FLOWCHART),
    ("sequencediagram", DiagramType.SEQUENCE),
    ("classdiagram", DiagramType.CLASS),
    ("statediagram", DiagramType.STATE),
    ("erdiagram", DiagramType.ER),
    ("gantt", DiagramType.GANTT),
    ("pie", DiagramType.PIE),
    ("journey", DiagramType.JOURNEY),
    ("mindmap", DiagramType.MINDMAP),
    ("timeline", DiagramType.TIMELINE),
    ("gitgraph", DiagramType.GITGRAPH),
    ("quadrantchart", DiagramType.QUADRANT),
    ("requirementdiagram", DiagramType.REQUIREMENT),
    ("c4", DiagramType.C4),
    ("sankey", DiagramType.SANKEY),
    ("xychart", DiagramType.XYCHART),
    ("block", DiagramType.BLOCK),
    ("packet", DiagramType.PACKET),
    ("kanban", DiagramType.KANBAN),
    ("architecture", DiagramType.ARCHITECTURE),
)

_ALL_FAMILIES = frozenset(StyleFamily)
_NODE_STYLING = frozenset(
    {StyleFamily.STYLE, StyleFamily.CLASS_DEF, StyleFamily.CLASS_ASSIGN, StyleFamily.INLINE_CLASS}
)

STYLE_SUPPORT: dict[DiagramType, frozenset[StyleFamily]] = {
    DiagramType.FLOWCHART: _ALL_FAMILIES,
    DiagramType.UNKNOWN: _ALL_FAMILIES,
    DiagramType.CLASS: _NODE_STYLING,
    DiagramType.STATE: _NODE_STYLING,
    DiagramType.ER: _NODE_STYLING,
    DiagramType.REQUIREMENT: _NODE_STYLING,
    DiagramType.BLOCK: frozenset(
        {StyleFamily.STYLE, StyleFamily.CLASS_DEF, StyleFamily.CLASS_ASSIGN}
    ),
    DiagramType.MINDMAP: frozenset({StyleFamily.INLINE_CLASS}),
    DiagramType.QUADRANT: frozenset({StyleFamily.CLASS_DEF, StyleFamily.INLINE_CLASS}),
}

# Diagram types whose lines use node-shape delimiters and edge labels
NODE_SYNTAX_TYPES = frozenset({DiagramType.FLOWCHART, DiagramType.MINDMAP, DiagramType.UNKNOWN})


def front_matter_length(lines: list[str]) -> int:
    """Number of leading lines taken by a `---` delimited front-matter block."""
    if not lines or lines[0].strip() != "---":
        return 0
    for index in range(1, len(lines)):
        if lines[index].strip() == "---":
            return index + 1
    return 0


def find_declaration_line(lines: list[str]) -> int | None:
    """Find the index of the first significant line.

    Blank lines, `%%` comments (including `%%{init: ...}%%` directives) and a
    leading front-matter block are skipped.

    Returns:
        0-based index, or None for a document with no content
    """
    for index in range(front_matter_length(lines), len(lines)):
        stripped = lines[index].strip()
        if not stripped or stripped.startswith("%%"):
            continue
        return index
    return None


def detect_diagram_type(lines: list[str] | str) -> DiagramType:
    """Detect the diagram type from its declaration line.

    Args:
        lines: Document lines, or the whole document as one string

    Returns:
        The matching DiagramType, or UNKNOWN when the first significant line
        is not a known declaration

    Examples:
        >>> detect_diagram_type("%% notes\\ngraph TD\\nA --> B")
        <DiagramType.FLOWCHART: 'flowchart'>
    """
    if isinstance(lines, str):
        lines = lines.split("\n")
    index = find_declaration_line(lines)
    if index is None:
        return DiagramType.UNKNOWN

    first = lines[index].strip().lower()
    for keyword, diagram_type in DIAGRAM_KEYWORDS:
        if first.startswith(keyword):
            return diagram_type
    return DiagramType.UNKNOWN


def supports_family(diagram_type: DiagramType, family: StyleFamily) -> bool:
    """Check whether a styling family is legal in a diagram type."""
    return family in STYLE_SUPPORT.get(diagram_type, frozenset())


def uses_node_syntax(diagram_type: DiagramType) -> bool:
    """Check whether node, edge and subgraph repairs apply to a diagram type."""
    return diagram_type in NODE_SYNTAX_TYPES

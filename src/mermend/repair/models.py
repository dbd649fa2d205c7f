"""Data models for the repair engine."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class DiagramType(str, Enum):
    """Mermaid diagram families recognized by the detector."""

    FLOWCHART = "flowchart"
    SEQUENCE = "sequence"
    CLASS = "class"
    STATE = "state"
    ER = "er"
    GANTT = "gantt"
    PIE = "pie"
    JOURNEY = "journey"
    MINDMAP = "mindmap"
    TIMELINE = "timeline"
    GITGRAPH = "gitgraph"
    QUADRANT = "quadrant"
    REQUIREMENT = "requirement"
    C4 = "c4"
    SANKEY = "sankey"
    XYCHART = "xychart"
    BLOCK = "block"
    PACKET = "packet"
    KANBAN = "kanban"
    ARCHITECTURE = "architecture"
    UNKNOWN = "unknown"


class OccurrenceKind(str, Enum):
    """Kinds of span a scanner can recognize on a line.

    Only the node kinds are produced by `scan_nodes`; the rest name the
    spans the line passes rewrite directly.
    """

    BOX_NODE = "box-node"
    ROUND_NODE = "round-node"
    RHOMBUS_NODE = "rhombus-node"
    STADIUM_NODE = "stadium-node"
    SUBROUTINE_NODE = "subroutine-node"
    CYLINDER_NODE = "cylinder-node"
    CIRCLE_NODE = "circle-node"
    DOUBLE_CIRCLE_NODE = "double-circle-node"
    HEXAGON_NODE = "hexagon-node"
    TRAPEZOID_NODE = "trapezoid-node"
    FLAG_NODE = "flag-node"
    EDGE_LABEL = "edge-label"
    SUBGRAPH_TITLE = "subgraph-title"
    MISPLACED_CLASS = "misplaced-class"
    LEAKED_CONTENT = "leaked-content"
    ORPHAN_BLOCK_CLOSE = "orphan-block-close"
    TRAILING_SYNTAX = "trailing-syntax"
    LINKSTYLE_DIRECTIVE = "linkStyle-directive"


class FixType(str, Enum):
    """Categories of rewrite recorded in the change log."""

    ORPHAN_END = "orphan_end"
    UNSUPPORTED_STYLE_DIRECTIVE = "unsupported_style_directive"
    UNSUPPORTED_CLASS_ASSIGN = "unsupported_class_assign"
    LINKSTYLE_HEX_COLOR = "linkstyle_hex_color"
    TRAILING_SYNTAX = "trailing_syntax"
    EDGE_LABEL_DELIMITER = "edge_label_delimiter"
    EDGE_LABEL_CONTENT = "edge_label_content"
    SUBGRAPH_TITLE = "subgraph_title"
    UNQUOTED_SPECIAL_CHARS = "unquoted_special_chars"
    MISPLACED_CLASS = "misplaced_class"
    LEAKED_CONTENT = "leaked_content"
    CLASS_SUFFIX_SPACING = "class_suffix_spacing"


class Fix(BaseModel):
    """A single rewrite applied to one line of a document."""

    line: int = Field(..., ge=1)
    original: str
    fixed: str
    type: FixType | None = None


class FixResult(BaseModel):
    """Outcome of repairing a document."""

    code: str
    fixes: list[Fix] = Field(default_factory=list)
    diagram_type: DiagramType = DiagramType.UNKNOWN

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_changes(self) -> bool:
        """Whether any fix was applied."""
        return len(self.fixes) > 0


class Issue(BaseModel):
    """A problem found by analysis, without rewriting anything."""

    line: int = Field(..., ge=1)
    type: FixType
    content: str
    description: str


@dataclass(frozen=True)
class Occurrence:
    """A recognized span on a line, in offsets of that line."""

    text: str
    start: int
    end: int  # exclusive
    kind: OccurrenceKind

    def overlaps(self, start: int, end: int) -> bool:
        """Check whether this span intersects [start, end)."""
        return self.start < end and start < self.end

"""Tests for line-level directives."""

from mermend.repair.diagram_type import StyleFamily
from mermend.repair.directives import (
    classify_directive,
    drop_unsupported_directive,
    fix_link_style_hex,
    fix_subgraph_title,
    is_exact_directive,
)
from mermend.repair.models import DiagramType, FixType


class TestClassifyDirective:
    """Test directive classification."""

    def test_families(self):
        """Test each styling statement."""
        assert classify_directive("style A fill:#f9f") == StyleFamily.STYLE
        assert classify_directive("  classDef hot fill:#f00") == StyleFamily.CLASS_DEF
        assert classify_directive("class A hot") == StyleFamily.CLASS_ASSIGN
        assert classify_directive("linkStyle 0 stroke:#f00") == StyleFamily.LINK_STYLE
        assert classify_directive("A --> B") is None

    def test_exact_statement(self):
        """Test the strict statement shapes."""
        assert is_exact_directive("style A fill:#f9f,stroke:#333", StyleFamily.STYLE)
        assert is_exact_directive("class A,B hot", StyleFamily.CLASS_ASSIGN)
        assert not is_exact_directive("style guide :a1, 2024-01-01, 3d", StyleFamily.STYLE)


class TestDropUnsupportedDirective:
    """Test drop_unsupported_directive."""

    def test_style_in_sequence_diagram(self):
        """Test deleting a style statement."""
        line, fixes = drop_unsupported_directive("style A fill:#f9f", 4, DiagramType.SEQUENCE)

        assert line is None
        assert fixes[0].line == 4
        assert fixes[0].original == "style A fill:#f9f"
        assert fixes[0].fixed == ""
        assert fixes[0].type == FixType.UNSUPPORTED_STYLE_DIRECTIVE

    def test_class_assignment_in_mindmap(self):
        """Test deleting a class assignment."""
        line, fixes = drop_unsupported_directive("  class A urgent", 2, DiagramType.MINDMAP)

        assert line is None
        assert fixes[0].type == FixType.UNSUPPORTED_CLASS_ASSIGN

    def test_supported_statement_kept(self):
        """Test keeping statements the diagram type supports."""
        assert drop_unsupported_directive("classDef hot fill:#f00", 1, DiagramType.FLOWCHART) == (
            "classDef hot fill:#f00",
            [],
        )
        assert drop_unsupported_directive(
            "classDef hot color: #ff0000", 1, DiagramType.QUADRANT
        ) == ("classDef hot color: #ff0000", [])

    def test_loose_match_kept(self):
        """Test that a line only starting with a keyword is kept."""
        line = "style guide :a1, 2024-01-01, 3d"

        assert drop_unsupported_directive(line, 1, DiagramType.GANTT) == (line, [])


class TestFixLinkStyleHex:
    """Test fix_link_style_hex."""

    def test_appends_opacity(self):
        """Test the hex color workaround."""
        line, fixes = fix_link_style_hex("linkStyle 0 stroke:#ff3", 2)

        assert line == "linkStyle 0 stroke:#ff3,stroke-opacity:1;"
        assert fixes[0].type == FixType.LINKSTYLE_HEX_COLOR

    def test_trailing_semicolon(self):
        """Test that an existing semicolon is not doubled."""
        line, _ = fix_link_style_hex("linkStyle 0 stroke:#ff3;", 2)

        assert line == "linkStyle 0 stroke:#ff3,stroke-opacity:1;"

    def test_named_color_unchanged(self):
        """Test that a named color needs nothing."""
        assert fix_link_style_hex("linkStyle 0 stroke:red", 1) == ("linkStyle 0 stroke:red", [])


class TestFixSubgraphTitle:
    """Test fix_subgraph_title."""

    def test_quotes_title(self):
        """Test quoting a title with parentheses."""
        line, fixes = fix_subgraph_title("subgraph S1 [Phase (1)]", 2)

        assert line == 'subgraph S1 ["Phase (1)"]'
        assert fixes[0].original == "Phase (1)"
        assert fixes[0].fixed == '"Phase (1)"'
        assert fixes[0].type == FixType.SUBGRAPH_TITLE

    def test_left_alone(self):
        """Test titles that need nothing."""
        for line in ["subgraph One", 'subgraph S1 ["Phase (1)"]', "subgraph S1 [Phase one]"]:
            assert fix_subgraph_title(line, 1) == (line, [])

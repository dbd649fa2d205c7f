"""Tests for node shape scanning and repair."""

import pytest

from mermend.repair.models import FixType, OccurrenceKind
from mermend.repair.shapes import detect_special_shapes, repair_nodes, scan_nodes


class TestScanNodes:
    """Test scan_nodes."""

    @pytest.mark.parametrize(
        "line,kind,content",
        [
            ("A(((Double)))", OccurrenceKind.DOUBLE_CIRCLE_NODE, "Double"),
            ("A([Stadium info])", OccurrenceKind.STADIUM_NODE, "Stadium info"),
            ("A[[Sub]]", OccurrenceKind.SUBROUTINE_NODE, "Sub"),
            ("DB[(Database)]", OccurrenceKind.CYLINDER_NODE, "Database"),
            ("A((Inner Circle))", OccurrenceKind.CIRCLE_NODE, "Inner Circle"),
            ("H{{Hex}}", OccurrenceKind.HEXAGON_NODE, "Hex"),
            ("T[/Trap\\]", OccurrenceKind.TRAPEZOID_NODE, "Trap"),
            ("F>Flag]", OccurrenceKind.FLAG_NODE, "Flag"),
            ("B[Box]", OccurrenceKind.BOX_NODE, "Box"),
            ("R{Question}", OccurrenceKind.RHOMBUS_NODE, "Question"),
            ("A(Hello (World))", OccurrenceKind.ROUND_NODE, "Hello (World)"),
            ("A((C (x)))", OccurrenceKind.CIRCLE_NODE, "C (x)"),
            ("A(((Dbl (x))))", OccurrenceKind.DOUBLE_CIRCLE_NODE, "Dbl (x)"),
        ],
    )
    def test_recognizes_shape(self, line, kind, content):
        """Test that each shape is recognized with its content."""
        nodes = scan_nodes(line)

        assert len(nodes) == 1
        assert nodes[0].kind == kind
        assert nodes[0].content == content
        assert nodes[0].text == line

    def test_several_nodes_in_order(self):
        """Test nodes on both sides of an edge."""
        nodes = scan_nodes("A[One] --> B(Two)")

        assert [node.node_id for node in nodes] == ["A", "B"]
        assert [node.kind for node in nodes] == [OccurrenceKind.BOX_NODE, OccurrenceKind.ROUND_NODE]

    def test_class_suffix_captured(self):
        """Test that a class suffix belongs to the node span."""
        node = scan_nodes("A[Box]:::hot:::big --> B")[0]

        assert node.suffix == ":::hot:::big"
        assert node.end == len("A[Box]:::hot:::big")

    def test_node_inside_quotes_skipped(self):
        """Test that node-like text in a quoted label is not a node."""
        nodes = scan_nodes('A["B[x]"]')

        assert [node.node_id for node in nodes] == ["A"]
        assert nodes[0].content == '"B[x]"'

    def test_html_tags_are_not_flags(self):
        """Test that <b> and </b> are not read as flag nodes."""
        nodes = scan_nodes("A[<b>bold</b>]")

        assert [node.kind for node in nodes] == [OccurrenceKind.BOX_NODE]

    def test_empty_content_skipped(self):
        """Test that empty brackets are not nodes."""
        assert scan_nodes("A[]") == []

    def test_unbalanced_circle_uses_first_close(self):
        """Test a circle whose inner parens never balance."""
        nodes = scan_nodes("A((a (b))")

        assert len(nodes) == 1
        assert nodes[0].content == "a (b"
        assert nodes[0].text == "A((a (b))"


class TestRepairNodes:
    """Test repair_nodes."""

    def test_quotes_special_content(self):
        """Test quoting a round node with nested parens."""
        line, fixes = repair_nodes("A(Hello (World))", 4)

        assert line == 'A("Hello (World)")'
        assert len(fixes) == 1
        assert fixes[0].line == 4
        assert fixes[0].original == "A(Hello (World))"
        assert fixes[0].type == FixType.UNQUOTED_SPECIAL_CHARS

    def test_quoted_node_unchanged(self):
        """Test that a quoted label is left alone."""
        line, fixes = repair_nodes('A["Hello (World)"]', 1)

        assert line == 'A["Hello (World)"]'
        assert fixes == []

    def test_moves_misplaced_class(self):
        """Test moving a class token out of the label."""
        line, fixes = repair_nodes("A[:::warn Danger zone] --> B", 1)

        assert line == "A[Danger zone]:::warn --> B"
        assert fixes[0].type == FixType.MISPLACED_CLASS

    def test_inline_classes_disabled(self):
        """Test that class tokens stay put where inline classes are illegal."""
        line, fixes = repair_nodes("A[:::warn Danger]", 1, inline_classes=False)

        assert line == "A[:::warn Danger]"
        assert fixes == []

    def test_merges_leaked_content(self):
        """Test merging text that escaped the closing bracket."""
        line, fixes = repair_nodes("A[Title] (v2) --> B", 1)

        assert line == 'A["Title (v2)"] --> B'
        assert fixes[0].type == FixType.LEAKED_CONTENT
        assert fixes[0].original == "A[Title] (v2)"

    def test_reserved_chars(self):
        """Test quoting of % with the setting on and off."""
        assert repair_nodes("A[50% done]", 1)[0] == 'A["50% done"]'
        assert repair_nodes("A[50% done]", 1, reserved_chars=False)[0] == "A[50% done]"

    def test_several_nodes_on_one_line(self):
        """Test repairing two nodes in one pass."""
        line, fixes = repair_nodes("A[Start (1)] --> B{Choice (2)}", 1)

        assert line == 'A["Start (1)"] --> B{"Choice (2)"}'
        assert len(fixes) == 2

    def test_circles_keep_inner_parens_in_label(self):
        """Test that circle labels are quoted whole."""
        line, fixes = repair_nodes("A((C (x))) --> B(((Dbl (x))))", 1)

        assert line == 'A(("C (x)")) --> B((("Dbl (x)")))'
        assert [fix.type for fix in fixes] == [FixType.UNQUOTED_SPECIAL_CHARS] * 2

    @pytest.mark.parametrize(
        "line",
        [
            "A(Level 1 (Level 2 (Level 3)))",
            'A(Text "quote" (parens))',
            "A[Start (1)] --> B{Choice (2)} --> C[:::warn Danger zone]",
            "A[Title] (v2) --> B((C (x)))",
        ],
    )
    @pytest.mark.parametrize("passes", [1, 2, 3])
    def test_extra_pass_changes_nothing(self, line, passes):
        """Test that one pass more than the cap gives the same line."""
        capped = repair_nodes(line, 1, max_passes=passes)
        extra = repair_nodes(line, 1, max_passes=passes + 1)

        assert capped == extra


class TestDetectSpecialShapes:
    """Test detect_special_shapes."""

    def test_shapes_in_priority_order(self):
        """Test that shapes are listed once each, in table order."""
        code = "graph TD\nA((One)) --> B((Two))\nC{{Hex}} --> D[[Sub]]"

        assert detect_special_shapes(code) == ["subroutine", "circle", "hexagon"]

    def test_no_special_shapes(self):
        """Test a document with only plain shapes."""
        assert detect_special_shapes("A[Box] --> B(Round)") == []

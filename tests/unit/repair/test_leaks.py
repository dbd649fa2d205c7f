"""Tests for leaked label content."""

from mermend.repair.leaks import LeakedContent, find_leaked_content


class TestFindLeakedContent:
    """Test find_leaked_content."""

    def test_parenthesised_leak(self):
        """Test text in parentheses after a box node."""
        leak = find_leaked_content("A[Title] (v2) --> B", 8)

        assert leak == LeakedContent(" (v2)", "", 13)

    def test_strict_leak_with_class(self):
        """Test text glued to the delimiter and ended by a class suffix."""
        line = "A[Title]<br/>subtitle:::cls"

        leak = find_leaked_content(line, 8)

        assert leak == LeakedContent("<br/>subtitle", ":::cls", len(line))

    def test_loose_leak_stops_at_connector(self):
        """Test that a leak never runs into the next edge."""
        leak = find_leaked_content("A[x]<br/>foo --> B", 4)

        assert leak == LeakedContent("<br/>foo", "", 12)

    def test_loose_leak_splits_trailing_classes(self):
        """Test that classes at the end of a loose leak are kept apart."""
        leak = find_leaked_content("A[x] (v2):::hot --> B", 4)

        assert leak == LeakedContent(" (v2)", ":::hot", 15)

    def test_refuses_another_node(self):
        """Test that text holding a node definition is not merged."""
        assert find_leaked_content("A[Title] (B[x])", 8) is None

    def test_refuses_unbalanced_parens(self):
        """Test that an unclosed paren is not merged."""
        assert find_leaked_content("A[x] (open", 4) is None

    def test_nothing_after_node(self):
        """Test end of line and trailing whitespace."""
        assert find_leaked_content("A[x]", 4) is None
        assert find_leaked_content("A[x]   ", 4) is None

    def test_edge_after_node_is_not_a_leak(self):
        """Test the common case of a node followed by an edge."""
        assert find_leaked_content("A[x] --> B", 4) is None

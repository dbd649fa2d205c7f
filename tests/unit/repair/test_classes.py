"""Tests for class-suffix handling."""

from mermend.repair.classes import extract_misplaced_classes, normalize_class_spacing
from mermend.repair.models import FixType


class TestExtractMisplacedClasses:
    """Test extract_misplaced_classes."""

    def test_single_class(self):
        """Test moving one leading class token."""
        extraction = extract_misplaced_classes(":::warn Danger zone")

        assert extraction.was_fixed
        assert extraction.clean_content == "Danger zone"
        assert extraction.extracted_classes == ":::warn"

    def test_several_classes_keep_order(self):
        """Test that several tokens are moved in order."""
        extraction = extract_misplaced_classes(":::a :::b Text")

        assert extraction.extracted_classes == ":::a:::b"
        assert extraction.clean_content == "Text"

    def test_only_classes_left_alone(self):
        """Test that content made only of class tokens is not touched."""
        extraction = extract_misplaced_classes(":::warn")

        assert not extraction.was_fixed
        assert extraction.clean_content == ":::warn"

    def test_no_classes(self):
        """Test plain content."""
        assert not extract_misplaced_classes("Text").was_fixed

    def test_quoted_content_requoted(self):
        """Test that fully quoted content stays quoted."""
        extraction = extract_misplaced_classes('":::warn Danger"')

        assert extraction.clean_content == '"Danger"'
        assert extraction.extracted_classes == ":::warn"

    def test_problematic_remainder_quoted(self):
        """Test that the remaining text is quoted when it needs it."""
        extraction = extract_misplaced_classes(":::warn Danger (high)")

        assert extraction.clean_content == '"Danger (high)"'


class TestNormalizeClassSpacing:
    """Test normalize_class_spacing."""

    def test_removes_gap(self):
        """Test removing whitespace before a class suffix."""
        line, fixes = normalize_class_spacing('A["x"] :::cls', 3)

        assert line == 'A["x"]:::cls'
        assert len(fixes) == 1
        assert fixes[0].line == 3
        assert fixes[0].original == "] :::cls"
        assert fixes[0].fixed == "]:::cls"
        assert fixes[0].type == FixType.CLASS_SUFFIX_SPACING

    def test_ignores_quoted_text(self):
        """Test that a gap inside a quoted label is kept."""
        line, fixes = normalize_class_spacing('A["x] :::y"]', 1)

        assert line == 'A["x] :::y"]'
        assert fixes == []

"""Line-level directives: subgraph titles, styling statements, linkStyle colors."""

import logging

import regex

from mermend.repair.diagram_type import StyleFamily, supports_family
from mermend.repair.models import DiagramType, Fix, FixType
from mermend.repair.quoting import has_problematic_content, is_fully_quoted, safe_quote

logger = logging.getLogger(__name__)

SUBGRAPH_TITLE_RE = regex.compile(
    r"^(?P<head>\s*subgraph\s+[\w-]+[ \t]*)\[(?P<title>.*)\](?P<rest>[ \t]*;?[ \t]*)$"
)

_STYLE_PROPERTIES = (
    r"(?:fill|stroke|stroke-width|stroke-dasharray|stroke-opacity|fill-opacity|color"
    r"|opacity|font-size|font-weight|font-family|font-style|text-decoration|rx|ry"
    r"|background|background-color|border|padding)"
)

# Loose patterns mark a line as a styling statement; strict patterns confirm
# the exact statement shape before a line may be deleted.
_DIRECTIVES = (
    (
        StyleFamily.LINK_STYLE,
        regex.compile(r"^\s*linkStyle\s"),
        regex.compile(r"^\s*linkStyle\s+(?:default|\d+(?:\s*,\s*\d+)*)\s+\S"),
    ),
    (
        StyleFamily.CLASS_DEF,
        regex.compile(r"^\s*classDef\s"),
        regex.compile(r"^\s*classDef\s+[\w,-]+\s+" + _STYLE_PROPERTIES + r"\s*:"),
    ),
    (
        StyleFamily.STYLE,
        regex.compile(r"^\s*style\s"),
        regex.compile(r"^\s*style\s+[\w-]+\s+" + _STYLE_PROPERTIES + r"\s*:"),
    ),
    (
        StyleFamily.CLASS_ASSIGN,
        regex.compile(r"^\s*class\s"),
        regex.compile(r"^\s*class\s+[\w-]+(?:\s*,\s*[\w-]+)*\s+[\w-]+\s*;?\s*$"),
    ),
)

_HEX_AT_END_RE = regex.compile(r"#[0-9a-fA-F]{3,8}[ \t]*;?[ \t]*$")
LINK_STYLE_OPACITY = ",stroke-opacity:1;"


def classify_directive(line: str) -> StyleFamily | None:
    """Return the styling family a line belongs to, if any."""
    for family, loose, _ in _DIRECTIVES:
        if loose.match(line):
            return family
    return None


def is_exact_directive(line: str, family: StyleFamily) -> bool:
    """Check that a line is a well-formed statement of the given family."""
    for candidate, _, strict in _DIRECTIVES:
        if candidate is family:
            return bool(strict.match(line))
    return False


def drop_unsupported_directive(
    line: str, line_number: int, diagram_type: DiagramType
) -> tuple[str | None, list[Fix]]:
    """Delete a styling statement that the diagram type does not support.

    Only lines that are exactly a styling statement are deleted; text that
    merely starts with a keyword (a gantt task named "style guide", say) is
    left alone.

    Args:
        line: A single line of diagram source
        line_number: 1-based line number used in the fix records
        diagram_type: Detected type of the document

    Returns:
        Tuple of (line, or None when deleted, fixes)
    """
    family = classify_directive(line)
    if family is None or supports_family(diagram_type, family):
        return line, []
    if not is_exact_directive(line, family):
        return line, []

    fix_type = (
        FixType.UNSUPPORTED_CLASS_ASSIGN
        if family is StyleFamily.CLASS_ASSIGN
        else FixType.UNSUPPORTED_STYLE_DIRECTIVE
    )
    logger.debug(f"Line {line_number}: removed {family.value} statement unsupported in {diagram_type.value}")
    return None, [Fix(line=line_number, original=line.strip(), fixed="", type=fix_type)]


def fix_link_style_hex(line: str, line_number: int) -> tuple[str, list[Fix]]:
    """Append an explicit stroke opacity to a linkStyle ending in a hex color.

    Some renderers mis-parse a hex color at the very end of a linkStyle
    statement; a trailing property avoids that.
    """
    if not _HEX_AT_END_RE.search(line):
        return line, []
    fixed = line.rstrip()
    if fixed.endswith(";"):
        fixed = fixed[:-1].rstrip()
    fixed += LINK_STYLE_OPACITY
    return fixed, [
        Fix(line=line_number, original=line.strip(), fixed=fixed.strip(), type=FixType.LINKSTYLE_HEX_COLOR)
    ]


def fix_subgraph_title(
    line: str, line_number: int, reserved_chars: bool = True
) -> tuple[str, list[Fix]]:
    """Quote a bracketed subgraph title that contains special characters.

    `subgraph S1 [Phase (1)]` becomes `subgraph S1 ["Phase (1)"]`. Titles
    without brackets are left alone.
    """
    match = SUBGRAPH_TITLE_RE.match(line)
    if not match:
        return line, []
    title = match.group("title")
    if not title.strip() or is_fully_quoted(title):
        return line, []
    if not has_problematic_content(title, reserved_chars):
        return line, []

    quoted = safe_quote(title)
    fixed = f"{match.group('head')}[{quoted}]{match.group('rest')}"
    return fixed, [Fix(line=line_number, original=title, fixed=quoted, type=FixType.SUBGRAPH_TITLE)]

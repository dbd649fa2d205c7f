"""Edge label repair for the `arrow|label|` connector syntax."""

import logging

import regex

from mermend.repair.lexing import (
    CONNECTOR_PATTERN,
    REGEX_TIMEOUT,
    find_quote_spans,
    in_quote_span,
    replace_spans,
)
from mermend.repair.models import Fix, FixType
from mermend.repair.quoting import has_problematic_content, is_fully_quoted, safe_quote

logger = logging.getLogger(__name__)

_LABEL_HEAD_RE = regex.compile(r"(?P<arrow>" + CONNECTOR_PATTERN + r")[ \t]*\|")

# A label closed with "]", "}" or ")" instead of "|", followed by the next node
_WRONG_CLOSE_RE = regex.compile(
    r"(?P<head>" + CONNECTOR_PATTERN + r"[ \t]*\|)"
    r"(?P<label>[^|\n]*?)"
    r"(?P<wrong>[\]\})])"
    r"(?P<gap>[ \t]*)"
    r"(?=\w+(?:[ \t]*[\[\(\{]|>))"
)

_OPENER_FOR = {"]": "[", "}": "{", ")": "("}


def _has_ambiguous_quotes(label: str) -> bool:
    """A label that opens with a quote but never closes it cannot be split safely."""
    stripped = label.strip()
    if not stripped or stripped[0] not in ('"', "'"):
        return False
    return stripped.count(stripped[0]) % 2 == 1


def fix_edge_label_delimiters(
    line: str,
    line_number: int,
    max_passes: int = 2,
    timeout: float = REGEX_TIMEOUT,
) -> tuple[str, list[Fix]]:
    """Replace a wrongly typed closing label delimiter with "|".

    `A -->|text] B[node]` becomes `A -->|text| B[node]`. The fix is skipped
    when the label holds an unmatched opener of the same bracket family, or
    opens with a quote it never closes.

    Args:
        line: A single line of diagram source
        line_number: 1-based line number used in the fix records
        max_passes: Upper bound on repeated scans of the line
        timeout: Regex timeout in seconds

    Returns:
        Tuple of (rewritten line, fixes)
    """
    fixes: list[Fix] = []
    for _ in range(max_passes):
        spans = find_quote_spans(line)
        edits = []
        for match in _WRONG_CLOSE_RE.finditer(line, timeout=timeout):
            if in_quote_span(match.start(), spans):
                continue
            label = match.group("label")
            wrong = match.group("wrong")
            opener = _OPENER_FOR[wrong]
            if label.count(opener) > label.count(wrong):
                continue
            if _has_ambiguous_quotes(label):
                continue

            fixed = match.group("head") + label + "| "
            edits.append((match.start(), match.end(), fixed))
            fixes.append(
                Fix(
                    line=line_number,
                    original=match.group(),
                    fixed=fixed,
                    type=FixType.EDGE_LABEL_DELIMITER,
                )
            )
        if not edits:
            break
        line = replace_spans(line, edits)
        logger.debug(f"Line {line_number}: closed {len(edits)} edge label(s) with '|'")
    return line, fixes


def _find_label_end(line: str, start: int) -> int:
    """Find the closing pipe of a label starting at start, or -1."""
    quote_aware = line[start:].lstrip().startswith('"')
    in_quote = False
    for index in range(start, len(line)):
        char = line[index]
        if quote_aware and char == '"':
            in_quote = not in_quote
        elif char == "|" and not in_quote:
            return index
    return -1


def fix_edge_label_content(
    line: str,
    line_number: int,
    reserved_chars: bool = True,
    timeout: float = REGEX_TIMEOUT,
) -> tuple[str, list[Fix]]:
    """Quote edge labels whose content would break the parser.

    `A -->|Yes (maybe)| B` becomes `A -->|"Yes (maybe)"| B`.
    """
    spans = find_quote_spans(line)
    edits = []
    fixes = []
    last_end = -1
    for match in _LABEL_HEAD_RE.finditer(line, timeout=timeout):
        if match.start() < last_end or in_quote_span(match.start(), spans):
            continue
        label_start = match.end()
        label_end = _find_label_end(line, label_start)
        if label_end < 0:
            continue
        last_end = label_end
        label = line[label_start:label_end]
        if not label.strip() or is_fully_quoted(label):
            continue
        if not has_problematic_content(label, reserved_chars):
            continue

        quoted = safe_quote(label)
        edits.append((label_start, label_end, quoted))
        fixes.append(
            Fix(
                line=line_number,
                original=f"{match.group()}{label}|",
                fixed=f"{match.group()}{quoted}|",
                type=FixType.EDGE_LABEL_CONTENT,
            )
        )
    return replace_spans(line, edits), fixes

"""Class-suffix handling: misplaced `:::class` tokens and suffix spacing."""

from dataclasses import dataclass

import regex

from mermend.repair.lexing import REGEX_TIMEOUT, find_quote_spans, in_quote_span, replace_spans
from mermend.repair.models import Fix, FixType
from mermend.repair.quoting import has_problematic_content, is_fully_quoted, safe_quote, unquote

CLASS_SUFFIX_PATTERN = r"(?::::[\w-]+)+"

_LEADING_CLASS_RE = regex.compile(r"\s*(:::[\w-]+)")
_SPACED_SUFFIX_RE = regex.compile(r"(?P<delim>[\]\)\}])(?P<gap>[ \t]+)(?P<classes>" + CLASS_SUFFIX_PATTERN + ")")


@dataclass(frozen=True)
class ClassExtraction:
    """Result of pulling leading class tokens out of node content."""

    clean_content: str
    extracted_classes: str
    was_fixed: bool


def extract_misplaced_classes(content: str, reserved_chars: bool = True) -> ClassExtraction:
    """Move `:::class` tokens written at the start of node content.

    `A[:::warn Danger]` is rewritten by the caller as `A[Danger]:::warn`.
    Tokens keep their order. When nothing but class tokens remains the
    content is left alone, since there would be no label to keep.

    Args:
        content: Node content between the delimiters
        reserved_chars: Passed through to the content classifier

    Returns:
        ClassExtraction; was_fixed is False when nothing was moved
    """
    originally_quoted = is_fully_quoted(content)
    remaining = unquote(content) if originally_quoted else content

    classes = []
    while True:
        match = _LEADING_CLASS_RE.match(remaining)
        if not match:
            break
        classes.append(match.group(1))
        remaining = remaining[match.end():]

    clean = remaining.strip()
    if not classes or not clean:
        return ClassExtraction(content, "", False)

    if originally_quoted or has_problematic_content(clean, reserved_chars):
        clean = safe_quote(clean)
    return ClassExtraction(clean, "".join(classes), True)


def normalize_class_spacing(
    line: str, line_number: int, timeout: float = REGEX_TIMEOUT
) -> tuple[str, list[Fix]]:
    """Remove whitespace between a closing delimiter and its class suffix.

    `A["x"] :::cls` becomes `A["x"]:::cls`.
    """
    spans = find_quote_spans(line)
    edits = []
    fixes = []
    for match in _SPACED_SUFFIX_RE.finditer(line, timeout=timeout):
        if in_quote_span(match.start(), spans):
            continue
        fixed = match.group("delim") + match.group("classes")
        edits.append((match.start(), match.end(), fixed))
        fixes.append(
            Fix(
                line=line_number,
                original=match.group(),
                fixed=fixed,
                type=FixType.CLASS_SUFFIX_SPACING,
            )
        )
    return replace_spans(line, edits), fixes

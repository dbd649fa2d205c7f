"""Lexical helpers shared by the repair passes.

Nothing here knows Mermaid grammar. These helpers answer narrow questions
about a single line: where the closed double-quoted literals are, how deeply
an offset is nested in brackets, and where connector arrows sit.
"""

from dataclasses import dataclass

import regex

# Seconds allowed for any single pattern evaluation (ReDoS guard)
REGEX_TIMEOUT = 1.0

# Longest forms first so "-.->" is never read as "-.-" followed by ">"
CONNECTOR_PATTERN = (
    r"<?(?:"
    r"-\.+->"
    r"|-\.+-"
    r"|-{2,}>"
    r"|-{2,}[ox](?!\w)"
    r"|-{3,}"
    r"|={2,}>"
    r"|={2,}[ox](?!\w)"
    r"|={3,}"
    r"|~{3,}"
    r")"
)
CONNECTOR_RE = regex.compile(CONNECTOR_PATTERN)

_OPENER_FOR = {"]": "[", ")": "(", "}": "{"}


@dataclass(frozen=True)
class QuoteSpan:
    """A closed double-quoted literal, quotes included."""

    start: int
    end: int  # exclusive

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end


def find_quote_spans(line: str) -> list[QuoteSpan]:
    """Find the closed double-quoted literals on a line.

    Quotes pair up left to right. A final unmatched quote opens no span, so a
    stray quote never hides the rest of the line from the scanners.

    Args:
        line: A single line of diagram source

    Returns:
        Spans in left-to-right order
    """
    spans = []
    start = None
    for index, char in enumerate(line):
        if char != '"':
            continue
        if start is None:
            start = index
        else:
            spans.append(QuoteSpan(start, index + 1))
            start = None
    return spans


def in_quote_span(offset: int, spans: list[QuoteSpan]) -> bool:
    """Check whether an offset falls inside any of the spans."""
    return any(span.contains(offset) for span in spans)


def nesting_depths(line: str, spans: list[QuoteSpan] | None = None) -> list[int]:
    """Compute the bracket depth in front of every offset of a line.

    Brackets inside quoted spans are ignored. A closer pops back to its
    matching opener, discarding unmatched openers in between; a closer with
    no matching opener is ignored. This keeps one malformed node from
    shifting the depth of every node after it.

    Args:
        line: A single line of diagram source
        spans: Quote spans of the line, computed when omitted

    Returns:
        List of len(line) + 1 depths; entry i is the depth before offset i
    """
    if spans is None:
        spans = find_quote_spans(line)
    quoted = {i for span in spans for i in range(span.start, span.end)}

    depths = []
    stack: list[str] = []
    for index, char in enumerate(line):
        depths.append(len(stack))
        if index in quoted:
            continue
        if char in "[({":
            stack.append(char)
        elif char in _OPENER_FOR:
            opener = _OPENER_FOR[char]
            if opener in stack:
                while stack.pop() != opener:
                    pass
    depths.append(len(stack))
    return depths


def replace_spans(line: str, edits: list[tuple[int, int, str]]) -> str:
    """Apply non-overlapping (start, end, replacement) edits right to left."""
    for start, end, replacement in sorted(edits, key=lambda edit: edit[0], reverse=True):
        line = line[:start] + replacement + line[end:]
    return line

"""Recovery of label text that escaped past a node's closing delimiter.

Two shapes of leak are recognized:

* strict: text glued to the delimiter and terminated by a class suffix,
  e.g. `A[Title]<br/>subtitle:::cls`
* loose: text starting with a line break tag or "(" that runs up to the next
  connector, comment marker, node separator or end of line,
  e.g. `A[Title] (v2) --> B`

Either way the leak is refused when it holds a connector, a comment marker
or what looks like the start of another node.
"""

from dataclasses import dataclass

import regex

from mermend.repair.classes import CLASS_SUFFIX_PATTERN
from mermend.repair.lexing import CONNECTOR_RE, REGEX_TIMEOUT

_STRICT_LEAK_RE = regex.compile(
    r"(?P<leak>[^\s:&;|%][^:|%]*?)(?P<classes>" + CLASS_SUFFIX_PATTERN + r")(?=\s|$|;)"
)
_LOOSE_START_RE = regex.compile(r"[ \t]*(?:<br\s*/?>|\()", regex.IGNORECASE)
_LOOSE_STOP_RE = regex.compile(CONNECTOR_RE.pattern + r"|%%|&|;")
_TRAILING_CLASSES_RE = regex.compile(r"(?P<classes>" + CLASS_SUFFIX_PATTERN + r")[ \t]*$")
_NODE_START_RE = regex.compile(r"(?<![\w</])\w+(?:[ \t]*[\[\(\{]|>)")


@dataclass(frozen=True)
class LeakedContent:
    """Text to merge back into the node that precedes it."""

    text: str
    classes: str
    end: int  # offset in the line just past the leak


def _is_plausible_leak(text: str, timeout: float) -> bool:
    if not text.strip():
        return False
    if "%%" in text or "|" in text:
        return False
    if CONNECTOR_RE.search(text, timeout=timeout):
        return False
    if _NODE_START_RE.search(text, timeout=timeout):
        return False
    return text.count("(") == text.count(")")


def find_leaked_content(
    line: str, position: int, timeout: float = REGEX_TIMEOUT
) -> LeakedContent | None:
    """Look for leaked label text starting at a node's closing offset.

    Args:
        line: The line being repaired
        position: Offset just past the node's closing delimiter
        timeout: Regex timeout in seconds

    Returns:
        LeakedContent, or None if no safe merge exists
    """
    if not line[position:].strip():
        return None

    strict = _STRICT_LEAK_RE.match(line, position, timeout=timeout)
    if strict and _is_plausible_leak(strict.group("leak"), timeout):
        return LeakedContent(strict.group("leak"), strict.group("classes"), strict.end())

    if not _LOOSE_START_RE.match(line, position, timeout=timeout):
        return None

    stop = _LOOSE_STOP_RE.search(line, position, timeout=timeout)
    cut = stop.start() if stop else len(line)
    span = line[position:cut].rstrip()
    end = position + len(span)

    classes = ""
    suffix = _TRAILING_CLASSES_RE.search(span, timeout=timeout)
    if suffix:
        classes = suffix.group("classes")
        span = span[: suffix.start()].rstrip()

    if not _is_plausible_leak(span, timeout):
        return None
    return LeakedContent(span, classes, end)

"""Neutralising `end` keywords that close no open block."""

import logging

import regex

from mermend.repair.lexing import CONNECTOR_RE
from mermend.repair.models import Fix, FixType

logger = logging.getLogger(__name__)

_COMMENT_RE = regex.compile(r"^\s*%%")
_SUBGRAPH_OPEN_RE = regex.compile(r"^\s*subgraph\b")
_SEQUENCE_OPEN_RE = regex.compile(r"^\s*(?:loop|alt|opt|par|critical|break|rect|box)(?:\s|$)")
_END_RE = regex.compile(r"^(?P<indent>\s*)end\s*;?\s*$")

ORPHAN_NOTE = "Auto-fix: orphan 'end' with no open block"


def opens_block(line: str) -> bool:
    """Check whether a line opens a block that a later `end` closes.

    Sequence-diagram keywords only count when the line holds no connector,
    so a flowchart node named `loop` is not mistaken for a block.
    """
    if _SUBGRAPH_OPEN_RE.match(line):
        return True
    return bool(_SEQUENCE_OPEN_RE.match(line)) and not CONNECTOR_RE.search(line)


def close_orphan_blocks(lines: list[str]) -> tuple[list[str], list[Fix]]:
    """Turn every `end` that closes nothing into a comment.

    Args:
        lines: Document lines

    Returns:
        Tuple of (new list of lines, fixes); the input list is not modified
    """
    result = []
    fixes = []
    depth = 0
    for number, line in enumerate(lines, start=1):
        if _COMMENT_RE.match(line):
            result.append(line)
            continue

        if opens_block(line):
            depth += 1
            result.append(line)
            continue

        end = _END_RE.match(line)
        if end is None:
            result.append(line)
            continue

        if depth > 0:
            depth -= 1
            result.append(line)
            continue

        stripped = line.strip()
        comment = f"{end.group('indent')}%% {stripped} %% {ORPHAN_NOTE}"
        result.append(comment)
        fixes.append(
            Fix(line=number, original=stripped, fixed=comment.strip(), type=FixType.ORPHAN_END)
        )
        logger.debug(f"Line {number}: commented out orphan 'end'")

    if depth > 0:
        logger.debug(f"{depth} block(s) left open at end of document")
    return result, fixes

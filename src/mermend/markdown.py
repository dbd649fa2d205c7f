"""Repair of Mermaid diagrams embedded in Markdown and rendered HTML."""

import html
import logging

import regex
from pydantic import BaseModel, Field

from mermend.repair.engine import RepairEngine
from mermend.repair.models import Fix, FixResult

logger = logging.getLogger(__name__)

_FENCE_OPEN_RE = regex.compile(r"^(?P<indent>[ \t]*)(?P<fence>`{3,}|~{3,})[ \t]*mermaid\b.*$")
_HTML_BLOCK_RE = regex.compile(
    r'<pre class="mermaid">(?:\s*<code>)?(?P<body>.*?)(?:</code>\s*)?</pre>',
    regex.DOTALL,
)


class MermaidBlock(BaseModel):
    """One fenced mermaid block found in a document."""

    start_line: int = Field(..., ge=1)  # first line of the diagram body
    result: FixResult


class DocumentFixResult(BaseModel):
    """Outcome of repairing every mermaid block in a document."""

    text: str
    blocks: list[MermaidBlock] = Field(default_factory=list)

    @property
    def fixes(self) -> list[Fix]:
        """All fixes, renumbered to lines of the whole document."""
        renumbered = []
        for block in self.blocks:
            for fix in block.result.fixes:
                renumbered.append(fix.model_copy(update={"line": fix.line + block.start_line - 1}))
        return renumbered

    @property
    def has_changes(self) -> bool:
        return any(block.result.has_changes for block in self.blocks)


def _is_closing_fence(line: str, fence: str) -> bool:
    stripped = line.strip()
    return (
        len(stripped) >= len(fence)
        and set(stripped) == {fence[0]}
    )


def fix_markdown(text: str, engine: RepairEngine | None = None) -> DocumentFixResult:
    """Repair every fenced ``mermaid`` block of a Markdown document.

    Text outside the blocks is never touched. A block whose closing fence is
    missing runs to the end of the document, as in CommonMark.

    Args:
        text: Markdown source
        engine: Repair engine to use, a default one when omitted

    Returns:
        DocumentFixResult with the rewritten text and per-block results
    """
    engine = engine or RepairEngine()
    lines = text.split("\n")
    output: list[str] = []
    blocks: list[MermaidBlock] = []

    index = 0
    while index < len(lines):
        opening = _FENCE_OPEN_RE.match(lines[index])
        output.append(lines[index])
        index += 1
        if not opening:
            continue

        fence = opening.group("fence")
        body_start = index
        while index < len(lines) and not _is_closing_fence(lines[index], fence):
            index += 1

        result = engine.fix("\n".join(lines[body_start:index]))
        blocks.append(MermaidBlock(start_line=body_start + 1, result=result))
        output.extend(result.code.split("\n") if body_start < index else [])

    fixed_text = "\n".join(output)
    logger.debug(f"Found {len(blocks)} mermaid block(s)")
    return DocumentFixResult(text=fixed_text, blocks=blocks)


def fix_html_blocks(page_html: str, engine: RepairEngine | None = None) -> str:
    """Repair ``<pre class="mermaid">`` blocks in rendered HTML.

    The block body is unescaped before repair and escaped again afterwards.
    A ``<code>`` wrapper is dropped, since Mermaid reads the text directly
    from the ``<pre>`` element.

    Args:
        page_html: HTML page content
        engine: Repair engine to use, a default one when omitted

    Returns:
        HTML with every mermaid block repaired
    """
    engine = engine or RepairEngine()

    def repair_block(match) -> str:
        code = html.unescape(match.group("body")).strip("\n")
        result = engine.fix(code)
        return f'<pre class="mermaid">\n{html.escape(result.code, quote=False)}\n</pre>'

    return _HTML_BLOCK_RE.sub(repair_block, page_html)

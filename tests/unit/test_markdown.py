"""Tests for repairing diagrams embedded in documents."""

from mermend.markdown import fix_html_blocks, fix_markdown
from mermend.repair.models import FixType

DOCUMENT = "\n".join(
    [
        "# Title",
        "",
        "```mermaid",
        "graph TD",
        "A(Hello (World))",
        "```",
        "",
        "Text (with parens)",
        "",
    ]
)


class TestFixMarkdown:
    """Tests for fix_markdown."""

    def test_repairs_block_only(self):
        """Test that only the mermaid block changes."""
        result = fix_markdown(DOCUMENT)

        assert result.text == DOCUMENT.replace("A(Hello (World))", 'A("Hello (World)")')
        assert result.has_changes
        assert len(result.blocks) == 1
        assert result.blocks[0].start_line == 4

    def test_fixes_use_document_lines(self):
        """Test that fix line numbers refer to the whole document."""
        fixes = fix_markdown(DOCUMENT).fixes

        assert [(fix.line, fix.type) for fix in fixes] == [(5, FixType.UNQUOTED_SPECIAL_CHARS)]

    def test_tilde_fence(self):
        """Test a block fenced with tildes."""
        result = fix_markdown("~~~mermaid\nA(x (y))\n~~~")

        assert result.text == '~~~mermaid\nA("x (y)")\n~~~'

    def test_other_languages_untouched(self):
        """Test that non-mermaid code blocks are ignored."""
        text = "```python\nA(x (y))\n```"

        result = fix_markdown(text)

        assert result.text == text
        assert result.blocks == []
        assert not result.has_changes

    def test_unclosed_fence_runs_to_end(self):
        """Test a block missing its closing fence."""
        result = fix_markdown("```mermaid\nA(x (y))")

        assert result.text == '```mermaid\nA("x (y)")'

    def test_empty_block(self):
        """Test a block with no body."""
        result = fix_markdown("```mermaid\n```")

        assert result.text == "```mermaid\n```"
        assert not result.has_changes

    def test_several_blocks(self):
        """Test that each block is repaired on its own."""
        text = "```mermaid\nA(x (y))\n```\n\n```mermaid\nsequenceDiagram\nA->>B: hi (there)\n```"

        result = fix_markdown(text)

        assert len(result.blocks) == 2
        assert [fix.line for fix in result.fixes] == [2]


class TestFixHtmlBlocks:
    """Tests for fix_html_blocks."""

    def test_repairs_pre_block(self):
        """Test repairing a rendered block and dropping the code wrapper."""
        page = '<p>x</p><pre class="mermaid"><code>graph TD\nA(Hello (World))</code></pre>'

        fixed = fix_html_blocks(page)

        assert fixed == '<p>x</p><pre class="mermaid">\ngraph TD\nA("Hello (World)")\n</pre>'

    def test_entities_round_trip(self):
        """Test that escaped arrows survive repair."""
        page = '<pre class="mermaid">A --&gt; B[x &amp; y]</pre>'

        assert fix_html_blocks(page) == '<pre class="mermaid">\nA --&gt; B[x &amp; y]\n</pre>'

    def test_other_html_untouched(self):
        """Test pages without mermaid blocks."""
        page = "<pre><code>A(x (y))</code></pre>"

        assert fix_html_blocks(page) == page

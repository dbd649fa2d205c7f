"""CLI entry point for mermend."""

import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mermend.config.logging import setup_logging
from mermend.config.manager import ConfigManager
from mermend.config.schema import GlobalConfig
from mermend.diagnostics import parse_render_error
from mermend.markdown import fix_markdown
from mermend.repair.engine import RepairEngine, issues_from_fixes
from mermend.repair.models import Fix, Issue
from mermend.ui import get_theme, set_theme
from mermend.utils.errors import (
    ConfigError,
    MermendError,
    NotFoundError,
    ValidationError,
)

app = typer.Typer(
    name="mermend",
    help="Detect and repair broken Mermaid diagram syntax",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

MARKDOWN_SUFFIXES = {".md", ".markdown", ".mdx"}
STDIN = "-"


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """mermend - repair Mermaid diagrams that fail to render."""
    setup_logging(verbose=verbose, log_file=log_file)


def _load_config() -> GlobalConfig:
    config = ConfigManager().load_config()
    set_theme(config.output.theme)
    return config


def _read_source(source: str) -> str:
    """Read diagram text from a file path or stdin."""
    if source == STDIN:
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        raise NotFoundError("File", source)
    return path.read_text(encoding="utf-8")


def _is_markdown(source: str, markdown: bool | None) -> bool:
    if markdown is not None:
        return markdown
    return source != STDIN and Path(source).suffix.lower() in MARKDOWN_SUFFIXES


def _fix_table(fixes: list[Fix]) -> Table:
    theme = get_theme()
    table = Table(header_style=theme.table_header, border_style=theme.table_border)
    table.add_column("Line", style=theme.line_number, justify="right")
    table.add_column("Type", style=theme.fix_type)
    table.add_column("Original", style=theme.removed)
    table.add_column("Fixed", style=theme.added)
    for fix in fixes:
        table.add_row(
            str(fix.line),
            fix.type.value if fix.type else "",
            escape(fix.original),
            escape(fix.fixed) if fix.fixed else theme.muted_text("(removed)"),
        )
    return table


def _issue_table(issues: list[Issue]) -> Table:
    theme = get_theme()
    table = Table(header_style=theme.table_header, border_style=theme.table_border)
    table.add_column("Line", style=theme.line_number, justify="right")
    table.add_column("Type", style=theme.fix_type)
    table.add_column("Content")
    table.add_column("Problem", style=theme.muted)
    for issue in issues:
        table.add_row(str(issue.line), issue.type.value, escape(issue.content), issue.description)
    return table


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from mermend import __version__

    console.print(f"[bold cyan]mermend[/bold cyan] v{__version__}")


@app.command("fix")
def fix_command(
    source: str = typer.Argument(..., help="Diagram or Markdown file, or '-' for stdin"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the fixed text to this file"
    ),
    in_place: bool = typer.Option(
        False, "--in-place", "-i", help="Overwrite the source file"
    ),
    markdown: bool | None = typer.Option(
        None,
        "--markdown/--no-markdown",
        help="Treat input as Markdown with ```mermaid blocks (default: by extension)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print the change table"),
) -> None:
    """Repair a Mermaid diagram.

    The fixed text goes to stdout unless --output or --in-place is given.

    Examples:
        mermend fix diagram.mmd

        mermend fix README.md --in-place

        cat diagram.mmd | mermend fix - > fixed.mmd
    """
    try:
        if in_place and source == STDIN:
            raise ValidationError(
                "Cannot fix stdin in place",
                suggestion="Use --output to write the fixed text to a file",
            )

        config = _load_config()
        engine = RepairEngine(config.repair)
        text = _read_source(source)

        if _is_markdown(source, markdown):
            document = fix_markdown(text, engine)
            fixed_text = document.text
            fixes = document.fixes
            payload = {
                "text": fixed_text,
                "fixes": [fix.model_dump(mode="json") for fix in fixes],
                "has_changes": document.has_changes,
            }
        else:
            result = engine.fix(text)
            fixed_text = result.code
            fixes = result.fixes
            payload = result.model_dump(mode="json")

        if in_place:
            path = Path(source)
            if fixes and config.output.backup:
                path.with_name(path.name + ".bak").write_text(text, encoding="utf-8")
            if fixes:
                path.write_text(fixed_text, encoding="utf-8")
        elif output is not None:
            output.write_text(fixed_text, encoding="utf-8")

        writes_stdout = not in_place and output is None
        if as_json:
            typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
            return
        if writes_stdout:
            typer.echo(fixed_text, nl=not fixed_text.endswith("\n"))

        if quiet:
            return
        report = err_console if writes_stdout else console
        theme = get_theme()
        if not fixes:
            report.print(theme.success_text("No changes needed"))
            return
        if config.output.show_diff:
            report.print(_fix_table(fixes))
        target = "" if writes_stdout else f" to {escape(str(output or source))}"
        report.print(theme.success_text(f"Applied {len(fixes)} fix(es){target}"))

    except ValidationError as e:
        console.print(get_theme().error_text(escape(str(e))))
        if e.suggestion:
            console.print(f"[dim]  {escape(e.suggestion)}[/dim]")
        sys.exit(1)
    except ConfigError as e:
        console.print(get_theme().error_text(escape(str(e))))
        sys.exit(1)
    except MermendError as e:
        console.print(get_theme().error_text(f"Error: {escape(str(e))}"))
        sys.exit(1)


@app.command("check")
def check_command(
    source: str = typer.Argument(..., help="Diagram or Markdown file, or '-' for stdin"),
    markdown: bool | None = typer.Option(
        None,
        "--markdown/--no-markdown",
        help="Treat input as Markdown with ```mermaid blocks (default: by extension)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print issues as JSON"),
) -> None:
    """Report problems without changing anything.

    Exits with status 1 when issues are found, so it can gate CI.

    Examples:
        mermend check diagram.mmd

        mermend check docs/architecture.md --json
    """
    try:
        config = _load_config()
        engine = RepairEngine(config.repair)
        text = _read_source(source)

        if _is_markdown(source, markdown):
            issues = issues_from_fixes(fix_markdown(text, engine).fixes)
        else:
            issues = engine.analyze(text)

        if as_json:
            typer.echo(
                json.dumps([issue.model_dump(mode="json") for issue in issues], indent=2, ensure_ascii=False)
            )
        elif not issues:
            console.print(get_theme().success_text("No issues found"))
        else:
            console.print(_issue_table(issues))
            console.print(get_theme().error_text(f"Found {len(issues)} issue(s)"))
            console.print(get_theme().muted_text("  Run 'mermend fix' to repair them"))

        if issues:
            sys.exit(1)

    except ConfigError as e:
        console.print(get_theme().error_text(escape(str(e))))
        sys.exit(1)
    except MermendError as e:
        console.print(get_theme().error_text(f"Error: {escape(str(e))}"))
        sys.exit(1)


@app.command("explain")
def explain_command(
    source: str = typer.Argument(..., help="Diagram file, or '-' for stdin"),
    message: str = typer.Option(
        ..., "--message", "-m", help="Error message reported by the Mermaid renderer"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Explain a Mermaid renderer error.

    Examples:
        mermend explain diagram.mmd -m "Parse error on line 3: ... Expecting 'SQE', got 'PS'"
    """
    try:
        config = _load_config()
        code = _read_source(source)
        report = parse_render_error(message, code, RepairEngine(config.repair))

        if as_json:
            typer.echo(report.model_dump_json(indent=2))
            return

        theme = get_theme()
        console.print(f"\n[bold]{escape(report.title)}[/bold]\n")
        console.print(theme.muted_text(escape(report.message)))

        if report.location is not None:
            console.print(
                f"\nLine [{theme.line_number}]{report.location.line_number}[/{theme.line_number}]: "
                f"{escape(report.location.content.strip())}"
            )
        if report.explanation:
            console.print(f"\n{escape(report.explanation)}")
        if report.suggestion:
            console.print(theme.muted_text(f"  {escape(report.suggestion)}"))

        if report.can_auto_fix:
            console.print()
            console.print(_fix_table(report.auto_fix_preview))
            console.print(theme.success_text("Auto-fix can repair this diagram: mermend fix"))
        else:
            console.print(theme.warning_text("Auto-fix has nothing to change; fix it by hand"))

    except ConfigError as e:
        console.print(get_theme().error_text(escape(str(e))))
        sys.exit(1)
    except MermendError as e:
        console.print(get_theme().error_text(f"Error: {escape(str(e))}"))
        sys.exit(1)


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="Action: show or set <key> <value>"),
    key: str | None = typer.Argument(None, help="Config key, dotted for nested keys"),
    value: str | None = typer.Argument(None, help="Config value (for 'set' action)"),
) -> None:
    """Manage mermend configuration.

    Actions:
        show: Display current configuration
        set:  Set a configuration value

    Examples:
        mermend config show

        mermend config set repair.node_passes 2

        mermend config set output.theme light
    """
    try:
        manager = ConfigManager()

        if action == "show":
            config = manager.load_config()
            theme = get_theme()

            console.print("\n[bold]mermend Configuration[/bold]\n")

            table = Table(show_header=False, box=None)
            table.add_column("Key", style=theme.primary, no_wrap=True)
            table.add_column("Value")

            table.add_row("Config file", str(manager.config_file))
            table.add_row("", "")
            table.add_row("log_level", config.log_level)
            for name, setting in config.repair.model_dump().items():
                table.add_row(f"repair.{name}", str(setting))
            for name, setting in config.output.model_dump().items():
                table.add_row(f"output.{name}", str(setting))

            console.print(table)

        elif action == "set":
            if not key or value is None:
                console.print(
                    get_theme().error_text("Usage: mermend config set <key> <value>")
                )
                sys.exit(1)

            manager.set_value(key, value)
            console.print(
                get_theme().success_text(f"Set [cyan]{escape(key)}[/cyan] = [yellow]{escape(value)}[/yellow]")
            )

        else:
            console.print(get_theme().error_text(f"Unknown action: {escape(action)}"))
            console.print("Valid actions: show, set")
            sys.exit(1)

    except ValidationError as e:
        console.print(get_theme().error_text(escape(str(e))))
        if e.suggestion:
            console.print(f"[dim]  {escape(e.suggestion)}[/dim]")
        sys.exit(1)
    except MermendError as e:
        console.print(get_theme().error_text(f"Error: {escape(str(e))}"))
        sys.exit(1)


if __name__ == "__main__":
    app()

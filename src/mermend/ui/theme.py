"""Color themes for mermend terminal output.

Usage:
    from mermend.ui import get_theme

    theme = get_theme()
    console.print(theme.success_text("No issues found"))
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Literal


class ThemeMode(str, Enum):
    """Available theme modes."""

    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


@dataclass(frozen=True)
class Theme:
    """Color theme for terminal output.

    All colors are Rich color names or styles.
    """

    mode: str

    # Status
    success: str
    error: str
    warning: str
    info: str

    # Semantic
    primary: str
    muted: str

    # Change log
    line_number: str  # Line numbers in fix tables
    removed: str  # Text as it was before a fix
    added: str  # Text as written by a fix
    fix_type: str  # Fix category names

    # Tables
    table_header: str
    table_border: str

    def success_text(self, text: str) -> str:
        """Format text with success color and checkmark."""
        return f"[{self.success}]✓[/{self.success}] {text}"

    def error_text(self, text: str) -> str:
        """Format text with error color and X mark."""
        return f"[{self.error}]✗[/{self.error}] {text}"

    def warning_text(self, text: str) -> str:
        """Format text with warning color and warning symbol."""
        return f"[{self.warning}]⚠[/{self.warning}] {text}"

    def muted_text(self, text: str) -> str:
        """Format text as muted."""
        return f"[{self.muted}]{text}[/{self.muted}]"


DARK_THEME = Theme(
    mode="dark",
    success="green",
    error="red",
    warning="yellow",
    info="cyan",
    primary="cyan",
    muted="dim",
    line_number="cyan",
    removed="red",
    added="green",
    fix_type="magenta",
    table_header="bold cyan",
    table_border="dim",
)

LIGHT_THEME = Theme(
    mode="light",
    success="dark_green",
    error="red3",
    warning="dark_orange",
    info="dark_cyan",
    primary="dark_cyan",
    muted="grey50",
    line_number="dark_cyan",
    removed="red3",
    added="dark_green",
    fix_type="dark_magenta",
    table_header="bold dark_cyan",
    table_border="grey50",
)


def detect_terminal_theme() -> Literal["light", "dark"]:
    """Guess whether the terminal background is light or dark.

    Honors MERMEND_THEME, then COLORFGBG, then known light-by-default
    terminals. Defaults to dark.
    """
    explicit = os.environ.get("MERMEND_THEME", "").lower()
    if explicit in ("light", "dark"):
        return explicit  # type: ignore[return-value]

    colorfgbg = os.environ.get("COLORFGBG", "")
    if colorfgbg:
        # "foreground;background", 15 is a white background and 0 a black one
        parts = colorfgbg.split(";")
        if len(parts) >= 2:
            try:
                return "light" if int(parts[-1]) >= 7 else "dark"
            except ValueError:
                pass

    if os.environ.get("TERM_PROGRAM", "").lower() == "apple_terminal":
        return "light"

    return "dark"


_current_theme: Theme | None = None


def set_theme(mode: ThemeMode | str) -> Theme:
    """Set and cache the current theme.

    Args:
        mode: Theme mode ('light', 'dark', or 'auto')

    Returns:
        The active Theme instance
    """
    global _current_theme

    if isinstance(mode, str):
        mode = ThemeMode(mode.lower())

    if mode == ThemeMode.AUTO:
        mode = ThemeMode(detect_terminal_theme())
    _current_theme = LIGHT_THEME if mode == ThemeMode.LIGHT else DARK_THEME
    return _current_theme


def get_theme() -> Theme:
    """Get the current theme, auto-detecting it on first use."""
    if _current_theme is None:
        return set_theme(ThemeMode.AUTO)
    return _current_theme


def reset_theme() -> None:
    """Reset the theme cache, forcing re-detection on next access."""
    global _current_theme
    _current_theme = None

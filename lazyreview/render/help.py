"""Help bar hints for normal, search, and feedback modes.

Rendering helpers here are presentation-only and side-effect free.
"""

from __future__ import annotations

from ..ansi import display_width, fit_ansi_line
from ..ui_theme import UITheme

HELP_HINTS_NORMAL: tuple[tuple[str, str], ...] = (
    ("up/dn", "file nav"),
    ("C-n/C-p", "diff nav"),
    ("C-v/M-v", "page"),
    ("/", "search"),
    ("enter", "feedback"),
    ("q", "quit"),
)

HELP_HINTS_SEARCH: tuple[tuple[str, str], ...] = (
    ("type", "query"),
    ("enter/C-n", "next match"),
    ("C-p", "prev match"),
    ("up/dn", "file nav"),
    ("C-u", "clear"),
    ("esc", "close search"),
)

HELP_HINTS_FEEDBACK: tuple[tuple[str, str], ...] = (
    ("enter", "save"),
    ("C-j", "newline"),
    ("esc", "cancel"),
)


def help_hints(*, modal_open: bool, search_active: bool) -> tuple[tuple[str, str], ...]:
    if modal_open:
        return HELP_HINTS_FEEDBACK
    if search_active:
        return HELP_HINTS_SEARCH
    return HELP_HINTS_NORMAL


def format_hints(hints: tuple[tuple[str, str], ...], theme: UITheme) -> str:
    parts = [f"{theme.help_key}{key}{theme.reset} {theme.help_dim}{desc}{theme.reset}" for key, desc in hints]
    return "  ".join(parts)


def render_help_bar(width: int, theme: UITheme, *, modal_open: bool = False, search_active: bool = False) -> str:
    """Return the centered help bar padded to ``width`` columns."""
    content = format_hints(help_hints(modal_open=modal_open, search_active=search_active), theme)
    content_width = display_width(content)
    if content_width < width:
        content = " " * ((width - content_width) // 2) + content
    return fit_ansi_line(content, width)


__all__ = [
    "HELP_HINTS_FEEDBACK",
    "HELP_HINTS_NORMAL",
    "HELP_HINTS_SEARCH",
    "format_hints",
    "help_hints",
    "render_help_bar",
]

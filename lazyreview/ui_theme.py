"""UI theme definitions and selection helpers.

Themes are small ANSI palettes for the review chrome: file list, diff lines,
search highlighting, help bar, and feedback modal.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    file_selected: str
    file_default: str
    status_modified: str
    status_added: str
    status_deleted: str
    status_renamed: str
    diff_add: str
    diff_remove: str
    diff_hunk: str
    diff_meta: str
    diff_context: str
    cursor_line: str
    search_match_line: str
    search_current_line: str
    search_prompt: str
    search_status: str
    status_message: str
    help_key: str
    help_dim: str
    modal_title: str
    modal_border: str
    dimmed: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    file_selected="\033[1;38;5;81m",
    file_default="\033[38;5;252m",
    status_modified="\033[38;5;214m",
    status_added="\033[38;5;42m",
    status_deleted="\033[38;5;203m",
    status_renamed="\033[38;5;141m",
    diff_add="\033[38;5;42m",
    diff_remove="\033[38;5;203m",
    diff_hunk="\033[38;5;44m",
    diff_meta="\033[1;38;5;250m",
    diff_context="\033[38;5;252m",
    cursor_line="\033[48;5;237m",
    search_match_line="\033[48;5;58m",
    search_current_line="\033[48;5;94m",
    search_prompt="\033[1;38;5;81m",
    search_status="\033[2;38;5;250m",
    status_message="\033[1;38;5;229m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    modal_title="\033[1;38;5;45m",
    modal_border="\033[38;5;45m",
    dimmed="\033[2m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    file_selected="\033[1;38;5;45m",
    file_default="\033[38;5;252m",
    status_modified="\033[38;5;215m",
    status_added="\033[38;5;84m",
    status_deleted="\033[38;5;210m",
    status_renamed="\033[38;5;117m",
    diff_add="\033[38;5;84m",
    diff_remove="\033[38;5;210m",
    diff_hunk="\033[38;5;39m",
    diff_meta="\033[1;38;5;153m",
    diff_context="\033[38;5;252m",
    cursor_line="\033[48;5;236m",
    search_match_line="\033[48;5;24m",
    search_current_line="\033[48;5;31m",
    search_prompt="\033[1;38;5;45m",
    search_status="\033[2;38;5;110m",
    status_message="\033[1;38;5;153m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
    modal_title="\033[1;38;5;39m",
    modal_border="\033[38;5;39m",
    dimmed="\033[2;38;5;24m",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="",
    reset="",
    file_selected="",
    file_default="",
    status_modified="",
    status_added="",
    status_deleted="",
    status_renamed="",
    diff_add="",
    diff_remove="",
    diff_hunk="",
    diff_meta="",
    diff_context="",
    cursor_line="",
    search_match_line="",
    search_current_line="",
    search_prompt="",
    search_status="",
    status_message="",
    help_key="",
    help_dim="",
    modal_title="",
    modal_border="",
    dimmed="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]

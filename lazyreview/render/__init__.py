"""Rendering engine for the split file-list/diff terminal view.

Defines render context data and writes fully composed ANSI frames.
Builders here read panel state but never mutate it.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..ansi import clip_ansi_line, display_width, fit_ansi_line, truncate_left
from ..feedback import FeedbackDraft
from ..highlight import sanitize_terminal_text, style_diff_line
from ..panels import DiffViewState, FileListState
from ..ui_theme import DEFAULT_THEME, UITheme
from ..vcs import FileChange, FileStatus
from .help import render_help_bar

DEFAULT_LEFT_PERCENT = 25.0
FEEDBACK_MAX_WIDTH = 72


@dataclass
class RenderContext:
    files: FileListState
    diff_view: DiffViewState
    width: int
    height: int
    left_width: int
    theme: UITheme = DEFAULT_THEME
    search_active: bool = False
    search_query: str = ""
    search_status: str = ""
    status_message: str = ""
    feedback: FeedbackDraft | None = None


def clamp_left_width(total_width: int, desired_left: int) -> int:
    """Clamp the file-pane width so both panes keep a usable size."""
    max_possible = max(1, total_width - 2)
    min_left = max(12, min(20, total_width - 12))
    max_left = max(min_left, total_width - 12)
    max_left = min(max_left, max_possible)
    min_left = min(min_left, max_left)
    return max(min_left, min(desired_left, max_left))


def default_left_width(total_width: int, percent: float | None = None) -> int:
    share = percent if percent is not None else DEFAULT_LEFT_PERCENT
    return clamp_left_width(total_width, int(total_width * share / 100.0))


def content_rows(height: int) -> int:
    """Rows shared by both panes (everything except the bottom bar)."""
    return max(2, height - 1)


def file_list_rows(height: int) -> int:
    return max(1, content_rows(height) - 1)


def diff_rows(height: int, search_active: bool) -> int:
    rows = content_rows(height) - 1
    if search_active:
        rows -= 1
    return max(1, rows)


def selected_with_ansi(text: str, sgr: str = "\033[7m") -> str:
    """Apply row styling without discarding existing ANSI colors."""
    if not text or not sgr:
        return text

    # Keep the row style active even when the text contains internal resets.
    return sgr + text.replace("\033[0m", "\033[0m" + sgr) + "\033[0m"


def _status_color(status: FileStatus, theme: UITheme) -> str:
    return {
        FileStatus.MODIFIED: theme.status_modified,
        FileStatus.ADDED: theme.status_added,
        FileStatus.DELETED: theme.status_deleted,
        FileStatus.RENAMED: theme.status_renamed,
    }[status]


def _file_row(change: FileChange, width: int, selected: bool, theme: UITheme) -> str:
    path = truncate_left(sanitize_terminal_text(change.path), max(1, width - 3))
    name_color = theme.file_selected if selected else theme.file_default
    marker = ">" if selected else " "
    status_color = _status_color(change.status, theme)
    row = f"{marker}{status_color}{change.status.value}{theme.reset} {name_color}{path}{theme.reset}"
    row = fit_ansi_line(row, width)
    if selected:
        return selected_with_ansi(row, theme.reverse)
    return row


def build_file_pane(context: RenderContext) -> list[str]:
    """Return header plus file rows, each exactly ``left_width`` columns wide."""
    files = context.files
    theme = context.theme
    width = context.left_width
    rows = file_list_rows(context.height)
    if files.is_filtered():
        header = f" Files ({files.count()}/{files.total_count()})"
    else:
        header = f" Files ({files.total_count()})"
    out = [fit_ansi_line(f"{theme.diff_meta}{header}{theme.reset}", width)]

    if files.total_count() == 0:
        out.append(fit_ansi_line(f"{theme.dimmed} No changes{theme.reset}", width))
    selected_display = files.display_cursor()
    for display_index in range(files.scroll_start, files.scroll_start + rows):
        if len(out) > rows:
            break
        change = files.file_at_display(display_index)
        if change is None:
            break
        out.append(_file_row(change, width, display_index == selected_display, theme))
    while len(out) < rows + 1:
        out.append(" " * width)
    return out


def _diff_row(view: DiffViewState, line_index: int, width: int, theme: UITheme) -> str:
    raw = sanitize_terminal_text(view.lines[line_index])
    styled = clip_ansi_line(style_diff_line(raw, theme), width)
    styled = fit_ansi_line(styled, width)
    if view.is_current_match(line_index):
        return selected_with_ansi(styled, theme.search_current_line)
    if view.is_line_matched(line_index):
        return selected_with_ansi(styled, theme.search_match_line)
    if line_index == view.cursor:
        return selected_with_ansi(styled, theme.cursor_line or theme.reverse)
    return styled


def build_search_bar(query: str, status: str, width: int, theme: UITheme) -> str:
    prompt = f"{theme.search_prompt}/{theme.reset}"
    badge = f"{theme.search_status}[{status}]{theme.reset}" if status else ""
    query_text = sanitize_terminal_text(query) + "_"
    room = max(0, width - 1 - display_width(badge) - 1)
    if display_width(query_text) > room:
        query_text = truncate_left(query_text, room)
    gap = max(1, width - 1 - display_width(query_text) - display_width(badge))
    return fit_ansi_line(f"{prompt}{query_text}{' ' * gap}{badge}", width)


def build_diff_pane(context: RenderContext) -> list[str]:
    """Return header, diff rows and the optional search bar for the right pane."""
    view = context.diff_view
    theme = context.theme
    width = max(1, context.width - context.left_width - 1)
    rows = diff_rows(context.height, context.search_active)

    if view.path is None:
        header = " No file selected"
    else:
        header = " " + truncate_left(sanitize_terminal_text(view.path), max(1, width - 2))
    out = [fit_ansi_line(f"{theme.diff_meta}{header}{theme.reset}", width)]

    if view.loading:
        out.append(fit_ansi_line(f"{theme.dimmed} Loading...{theme.reset}", width))
    elif view.path is not None and not view.lines:
        out.append(fit_ansi_line(f"{theme.dimmed} No diff to show{theme.reset}", width))
    else:
        stop = min(len(view.lines), view.scroll_start + rows)
        for line_index in range(view.scroll_start, stop):
            out.append(_diff_row(view, line_index, width, theme))
    while len(out) < rows + 1:
        out.append(" " * width)

    if context.search_active:
        out.append(build_search_bar(context.search_query, context.search_status, width, theme))
    return out


def build_feedback_box(draft: FeedbackDraft, width: int, theme: UITheme) -> list[str]:
    """Return the bordered feedback modal rows, each ``width`` columns wide."""
    inner = max(4, width - 4)
    border = theme.modal_border
    reset = theme.reset

    def boxed(text: str) -> str:
        return f"{border}│{reset} {fit_ansi_line(text, inner)} {border}│{reset}"

    title = " Feedback "
    top_fill = max(0, width - 2 - display_width(title))
    rows = [f"{border}╭{reset}{theme.modal_title}{title}{reset}{border}{'─' * top_fill}╮{reset}"]
    rows.append(boxed(f"{theme.dimmed}{sanitize_terminal_text(draft.anchor())}{reset}"))
    rows.append(boxed(""))
    if draft.line_content:
        preview = sanitize_terminal_text(draft.line_content)
        rows.append(boxed(style_diff_line(clip_ansi_line(preview, inner), theme)))
        rows.append(boxed(""))
    if draft.text():
        for line in draft.lines[:-1]:
            rows.append(boxed(sanitize_terminal_text(line)))
        rows.append(boxed(sanitize_terminal_text(draft.lines[-1]) + "_"))
    else:
        rows.append(boxed(f"_{theme.dimmed}Enter your feedback...{reset}"))
    rows.append(boxed(""))
    rows.append(boxed(f"{theme.help_dim}enter save  C-j newline  esc cancel{reset}"))
    rows.append(f"{border}╰{'─' * max(0, width - 2)}╯{reset}")
    return rows


def _overlay_rows(base: list[str], overlay: list[str], width: int) -> list[str]:
    box_width = max((display_width(line) for line in overlay), default=0)
    x = max(0, (width - box_width) // 2)
    y = max(0, (len(base) - len(overlay)) // 2)
    out = list(base)
    for offset, line in enumerate(overlay):
        row = y + offset
        if row >= len(out):
            break
        out[row] = fit_ansi_line(out[row], x) + line
    return out


def build_frame(context: RenderContext) -> str:
    """Compose one full-screen frame as a single ANSI string."""
    theme = context.theme
    width = max(1, context.width)
    left = build_file_pane(context)
    right = build_diff_pane(context)
    divider = f"{theme.divider}│{theme.reset}"
    rows = [f"{file_row}{divider}{diff_row}" for file_row, diff_row in zip(left, right)]

    if context.feedback is not None:
        box_width = max(20, min(FEEDBACK_MAX_WIDTH, width - 4))
        rows = _overlay_rows(rows, build_feedback_box(context.feedback, box_width, theme), width)

    if context.status_message:
        bottom = fit_ansi_line(
            f"{theme.status_message}{sanitize_terminal_text(context.status_message)}{theme.reset}",
            width,
        )
    else:
        bottom = render_help_bar(
            width,
            theme,
            modal_open=context.feedback is not None,
            search_active=context.search_active,
        )
    rows.append(bottom)
    return "\033[H\033[J" + "\r\n".join(rows) + "\033[0m"


def render_frame(context: RenderContext) -> None:
    os.write(sys.stdout.fileno(), build_frame(context).encode("utf-8", errors="replace"))


__all__ = [
    "RenderContext",
    "build_diff_pane",
    "build_feedback_box",
    "build_file_pane",
    "build_frame",
    "build_search_bar",
    "clamp_left_width",
    "content_rows",
    "default_left_width",
    "diff_rows",
    "file_list_rows",
    "render_frame",
    "selected_with_ansi",
]

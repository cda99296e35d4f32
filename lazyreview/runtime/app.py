"""Runtime composition layer for lazyreview.

Builds the coordinator, wires loop callbacks to rendering and key dispatch,
and runs the terminal session.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from ..input import ReviewKeyContext, handle_review_key
from ..render import RenderContext, default_left_width, diff_rows, file_list_rows, render_frame
from ..search import make_line_matcher
from ..ui_theme import UITheme, resolve_theme
from ..vcs import VCS
from .coordinator import ReviewCoordinator
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_TIMEOUT_MS = 120


@dataclass
class _Layout:
    columns: int = 80
    lines: int = 24
    left_width: int = 20


def build_coordinator(vcs: VCS, output_path: Path, matcher_name: str) -> ReviewCoordinator:
    """Create the coordinator and load the initial file list.

    ``VCSError`` from the first listing propagates to the caller.
    """
    coordinator = ReviewCoordinator(vcs, output_path, make_line_matcher(matcher_name))
    coordinator.load_files()
    return coordinator


def build_loop_callbacks(
    coordinator: ReviewCoordinator,
    theme: UITheme,
    left_pane_percent: float | None = None,
) -> RuntimeLoopCallbacks:
    layout = _Layout()

    def sync_layout(columns: int, lines: int) -> None:
        if (columns, lines) != (layout.columns, layout.lines):
            coordinator.dirty = True
        layout.columns = columns
        layout.lines = lines
        layout.left_width = default_left_width(columns, left_pane_percent)
        before = (coordinator.files.scroll_start, coordinator.diff_view.scroll_start)
        coordinator.files.ensure_cursor_visible(file_list_rows(lines))
        coordinator.diff_view.ensure_cursor_visible(diff_rows(lines, coordinator.search.is_active))
        if (coordinator.files.scroll_start, coordinator.diff_view.scroll_start) != before:
            coordinator.dirty = True

    def needs_render() -> bool:
        return coordinator.dirty

    def render(columns: int, lines: int) -> None:
        render_frame(
            RenderContext(
                files=coordinator.files,
                diff_view=coordinator.diff_view,
                width=columns,
                height=lines,
                left_width=layout.left_width,
                theme=theme,
                search_active=coordinator.search.is_active,
                search_query=coordinator.search.query,
                search_status=coordinator.search_status(),
                status_message=coordinator.status_message,
                feedback=coordinator.feedback,
            )
        )
        coordinator.dirty = False

    key_context = ReviewKeyContext(
        coordinator=coordinator,
        diff_page_rows=lambda: diff_rows(layout.lines, coordinator.search.is_active),
    )

    def handle_key(key: str) -> bool:
        return handle_review_key(key, key_context)

    return RuntimeLoopCallbacks(
        pump_events=coordinator.pump_events,
        sync_layout=sync_layout,
        needs_render=needs_render,
        render=render,
        handle_key=handle_key,
    )


def run_review(
    vcs: VCS,
    output_path: Path,
    *,
    matcher_name: str,
    theme_name: str | None = None,
    no_color: bool = False,
    left_pane_percent: float | None = None,
) -> ReviewCoordinator:
    """Run an interactive review session until the user quits."""
    coordinator = build_coordinator(vcs, output_path, matcher_name)
    theme = resolve_theme(theme_name, no_color=no_color)
    logger.info(
        "starting review: vcs=%s matcher=%s theme=%s output=%s",
        vcs.name,
        coordinator.search.matcher.name,
        theme.name,
        output_path,
    )
    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    run_main_loop(
        terminal,
        sys.stdin.fileno(),
        RuntimeLoopTiming(key_timeout_ms=KEY_TIMEOUT_MS),
        build_loop_callbacks(coordinator, theme, left_pane_percent),
    )
    return coordinator


__all__ = ["build_coordinator", "build_loop_callbacks", "run_review"]

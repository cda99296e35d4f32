"""Keeps search, file list, and diff view state in agreement.

Every mutation runs on the event-loop thread. Background diff loads arrive
as mailbox events and are applied through ``handle_event``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from queue import Queue

from ..diff_cache import DiffCache
from ..feedback import FeedbackDraft, calculate_line_number
from ..output import OutputError, append_feedback
from ..panels import DiffViewState, FileListState
from ..search import LineMatcher, SearchController
from ..vcs import VCS, FileChange
from .diff_loading import (
    DiffLoadResult,
    DiffLoadScheduler,
    DiffPreloadScheduler,
    PreloadBatchResult,
    drain_mailbox,
)

logger = logging.getLogger(__name__)

DIFF_ACTIONS = ("up", "down", "page_up", "page_down", "top", "bottom")


class ReviewCoordinator:
    """Owns the review session state and applies user and loader events."""

    def __init__(
        self,
        vcs: VCS,
        output_path: Path,
        matcher: LineMatcher | None = None,
        *,
        mailbox: Queue | None = None,
    ) -> None:
        self.vcs = vcs
        self.output_path = output_path
        self.mailbox: Queue = mailbox if mailbox is not None else Queue()
        self.cache = DiffCache()
        self.search = SearchController(matcher)
        self.files = FileListState()
        self.diff_view = DiffViewState()
        self.loader = DiffLoadScheduler(vcs.diff, self.mailbox)
        self.preloader = DiffPreloadScheduler(vcs.diff, self.mailbox)
        self.feedback: FeedbackDraft | None = None
        self.status_message = ""
        self.quit_requested = False
        self.dirty = True

    # File list and diff display

    def load_files(self) -> list[FileChange]:
        """Fetch changed files from the VCS and show the first one.

        ``VCSError`` propagates; a session cannot start without a file list.
        """
        changes = self.vcs.changed_files()
        self.files.set_files(changes)
        logger.info("loaded %d changed files from %s", len(changes), self.vcs.name)
        self._show_selected()
        return changes

    def _show_selected(self) -> None:
        selected = self.files.selected_file()
        self.dirty = True
        if selected is None:
            self.diff_view.clear_diff()
            return
        cached = self.cache.get(selected.path)
        if cached is None:
            self.diff_view.set_loading(selected.path)
            self.loader.schedule(selected.path)
            return
        self.diff_view.set_diff(selected.path, cached)
        self._refresh_diff_matches()

    def _refresh_diff_matches(self) -> None:
        if not self.search.is_active:
            return
        matches = self.search.search_in_diff(self.search.query, self.diff_view.lines)
        self.diff_view.matcher_error = self.search.matcher_error
        self.diff_view.set_search_matches(matches)
        self.dirty = True

    def move_file_cursor(self, delta: int) -> bool:
        """Move the file selection ``delta`` visible rows; return True on change."""
        changed = False
        step = self.files.cursor_down if delta > 0 else self.files.cursor_up
        for _ in range(abs(delta)):
            if not step():
                break
            changed = True
        if changed:
            self._show_selected()
        return changed

    def move_diff_cursor(self, action: str, page: int = 1) -> None:
        view = self.diff_view
        if action == "up":
            view.cursor_up()
        elif action == "down":
            view.cursor_down()
        elif action == "page_up":
            view.page_up(page)
        elif action == "page_down":
            view.page_down(page)
        elif action == "top":
            view.goto_top()
        elif action == "bottom":
            view.goto_bottom()
        else:
            raise ValueError(f"unknown diff action: {action!r}")
        self.dirty = True

    # Search

    def activate_search(self) -> None:
        self.search.activate()
        self.files.clear_filter()
        self.diff_view.activate_search()
        missing = self.cache.missing(self.files.paths())
        if missing:
            logger.debug("preloading %d diffs for search", len(missing))
            self.preloader.schedule(missing)
        self.dirty = True

    def edit_query(self, query: str) -> None:
        if not self.search.is_active:
            return
        self.search.set_query(query)
        self._apply_search()

    def _apply_search(self) -> None:
        if not self._filter_files():
            self._refresh_diff_matches()

    def _filter_files(self) -> bool:
        """Re-filter the file list; return True when the selection moved."""
        previous = self.files.selected_file()
        indices = self.search.search_all_files(self.search.query, self.files.paths(), self.cache)
        if indices:
            self.files.set_filtered_indices(indices)
        else:
            self.files.clear_filter()
        self.dirty = True
        if self.files.selected_file() == previous:
            return False
        self._show_selected()
        return True

    def deactivate_search(self) -> None:
        self.search.deactivate()
        self.files.clear_filter()
        self.diff_view.clear_search()
        self.dirty = True

    def next_match(self) -> None:
        self.diff_view.next_match()
        self.dirty = True

    def prev_match(self) -> None:
        self.diff_view.prev_match()
        self.dirty = True

    def search_status(self) -> str:
        """Combined file-count and in-diff match status for the search bar."""
        if not self.search.is_active or not self.search.query:
            return ""
        files_status = self.search.status()
        if self.search.matcher_error:
            return files_status
        return f"{files_status} · {self.diff_view.match_status()}"

    # Background events

    def handle_event(self, event: object) -> None:
        if isinstance(event, DiffLoadResult):
            self._handle_diff_loaded(event)
        elif isinstance(event, PreloadBatchResult):
            self._handle_preload_batch(event)
        else:
            logger.warning("ignoring unknown event %r", event)

    def _handle_diff_loaded(self, event: DiffLoadResult) -> None:
        waiting = self.diff_view.loading and self.diff_view.path == event.path
        if event.error is not None:
            self.status_message = f"Error: {event.error}"
            if waiting:
                self.diff_view.set_diff(event.path, "")
            self.dirty = True
            return
        if not self.cache.has(event.path):
            self.cache.put(event.path, event.diff)
        if waiting:
            self.diff_view.set_diff(event.path, self.cache.get(event.path) or "")
            self._refresh_diff_matches()
            self.dirty = True

    def _handle_preload_batch(self, event: PreloadBatchResult) -> None:
        fresh = {path: text for path, text in event.diffs.items() if not self.cache.has(path)}
        self.cache.update(fresh)
        if event.failed:
            logger.debug("preload failed for %d files", len(event.failed))
        if self.diff_view.loading and self.diff_view.path in fresh:
            path = self.diff_view.path
            self.diff_view.set_diff(path, fresh[path])
            self._refresh_diff_matches()
            self.dirty = True
        # The diff on screen is unchanged, so its match position stays put.
        if self.search.is_active and self.search.query:
            self._filter_files()

    def pump_events(self) -> int:
        """Apply every queued loader result; return how many were handled."""
        events = drain_mailbox(self.mailbox)
        for event in events:
            self.handle_event(event)
        return len(events)

    # Feedback

    def open_feedback(self) -> bool:
        selected_path = self.diff_view.path
        if not selected_path:
            return False
        line_number = calculate_line_number(self.diff_view.content(), self.diff_view.cursor)
        self.feedback = FeedbackDraft(
            file_path=selected_path,
            line_number=line_number,
            line_content=self.diff_view.current_line_content(),
        )
        self.dirty = True
        return True

    def cancel_feedback(self) -> None:
        self.feedback = None
        self.dirty = True

    def save_feedback(self) -> bool:
        """Append the open draft to the output file; an empty comment just closes it."""
        draft = self.feedback
        if draft is None:
            return False
        comment = draft.comment()
        if not comment:
            self.cancel_feedback()
            return False
        try:
            append_feedback(self.output_path, draft.file_path, draft.line_number, comment)
        except OutputError as exc:
            logger.error("saving feedback failed: %s", exc)
            self.status_message = f"Error: {exc}"
            saved = False
        else:
            self.status_message = "Feedback saved"
            saved = True
        self.feedback = None
        self.dirty = True
        return saved

    # Session

    def clear_status_message(self) -> None:
        if self.status_message:
            self.status_message = ""
            self.dirty = True

    def request_quit(self) -> None:
        self.quit_requested = True


__all__ = ["DIFF_ACTIONS", "ReviewCoordinator"]

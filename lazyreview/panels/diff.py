"""Displayed diff: lines, line cursor, and per-diff search matches."""

from __future__ import annotations

from collections.abc import Iterable

from ..search.matcher import split_diff_lines


class DiffViewState:
    """Lines of the displayed diff plus cursor and match bookkeeping.

    Matches are installed by the caller; this class never runs a search.
    """

    def __init__(self) -> None:
        self.path: str | None = None
        self.lines: list[str] = []
        self.cursor = 0
        self.scroll_start = 0
        self.loading = False
        self.searching = False
        self.matcher_error: str | None = None
        self._raw = ""
        self._matches: list[int] = []
        self._match_set: frozenset[int] = frozenset()
        self._current_match: int | None = None

    def set_diff(self, path: str, content: str) -> None:
        self.path = path
        self._raw = content
        self.lines = split_diff_lines(content)
        self.cursor = 0
        self.scroll_start = 0
        self.loading = False
        if self.searching:
            self._reset_matches()

    def set_loading(self, path: str) -> None:
        self.set_diff(path, "")
        self.loading = True

    def clear_diff(self) -> None:
        self.path = None
        self._raw = ""
        self.lines = []
        self.cursor = 0
        self.scroll_start = 0
        self.loading = False
        self._reset_matches()

    def content(self) -> str:
        return self._raw

    def current_line_content(self) -> str:
        if 0 <= self.cursor < len(self.lines):
            return self.lines[self.cursor]
        return ""

    def _reset_matches(self) -> None:
        self._matches = []
        self._match_set = frozenset()
        self._current_match = None

    def activate_search(self) -> None:
        self.searching = True
        self.matcher_error = None
        self._reset_matches()

    def clear_search(self) -> None:
        self.searching = False
        self.matcher_error = None
        self._reset_matches()

    def set_search_matches(self, matches: Iterable[int] | None) -> None:
        """Install ascending match lines; a non-empty set moves the cursor to the first."""
        self._matches = sorted({line for line in matches or () if 0 <= line < len(self.lines)})
        self._match_set = frozenset(self._matches)
        if self._matches:
            self._current_match = 0
            self.cursor = self._matches[0]
        else:
            self._current_match = None

    @property
    def matches(self) -> list[int]:
        return list(self._matches)

    @property
    def current_match(self) -> int | None:
        return self._current_match

    def next_match(self) -> None:
        if not self._matches:
            return
        current = -1 if self._current_match is None else self._current_match
        self._current_match = (current + 1) % len(self._matches)
        self.cursor = self._matches[self._current_match]

    def prev_match(self) -> None:
        if not self._matches:
            return
        current = 0 if self._current_match is None else self._current_match
        self._current_match = (current - 1) % len(self._matches)
        self.cursor = self._matches[self._current_match]

    def is_line_matched(self, line: int) -> bool:
        return line in self._match_set

    def is_current_match(self, line: int) -> bool:
        if self._current_match is None:
            return False
        return self._matches[self._current_match] == line

    def match_status(self) -> str:
        if self.matcher_error:
            return self.matcher_error
        if not self._matches:
            return "no matches"
        current = 0 if self._current_match is None else self._current_match
        return f"{current + 1}/{len(self._matches)}"

    def _clamp_cursor(self, line: int) -> None:
        self.cursor = max(0, min(line, len(self.lines) - 1)) if self.lines else 0

    def cursor_up(self) -> None:
        self._clamp_cursor(self.cursor - 1)

    def cursor_down(self) -> None:
        self._clamp_cursor(self.cursor + 1)

    def page_up(self, page: int) -> None:
        self._clamp_cursor(self.cursor - max(1, page))

    def page_down(self, page: int) -> None:
        self._clamp_cursor(self.cursor + max(1, page))

    def goto_top(self) -> None:
        self._clamp_cursor(0)

    def goto_bottom(self) -> None:
        self._clamp_cursor(len(self.lines) - 1)

    def ensure_cursor_visible(self, rows: int) -> None:
        rows = max(1, rows)
        if self.cursor < self.scroll_start:
            self.scroll_start = self.cursor
        elif self.cursor >= self.scroll_start + rows:
            self.scroll_start = self.cursor - rows + 1
        max_start = max(0, len(self.lines) - rows)
        self.scroll_start = max(0, min(self.scroll_start, max_start))


__all__ = ["DiffViewState"]

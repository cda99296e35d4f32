"""Changed-file list with an optional search filter.

The cursor is stored as a file index so the selection survives filter
changes; display positions are derived on demand.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..vcs import FileChange


class FileListState:
    """Ordered file list, optional filter, and filter-aware cursor."""

    def __init__(self) -> None:
        self._files: list[FileChange] = []
        self._filter: list[int] | None = None
        self.cursor = 0
        self.scroll_start = 0

    def set_files(self, files: Iterable[FileChange]) -> None:
        self._files = list(files)
        self._filter = None
        self.cursor = 0
        self.scroll_start = 0

    def set_filtered_indices(self, indices: Iterable[int]) -> None:
        """Install a filter of file indices.

        Out-of-range and duplicate indices are dropped. An empty result clears
        the filter. The cursor stays put when its file is still visible,
        otherwise it moves to the first filtered file.
        """
        total = len(self._files)
        cleaned = sorted({index for index in indices if 0 <= index < total})
        if not cleaned:
            self.clear_filter()
            return
        self._filter = cleaned
        if self.cursor not in cleaned:
            self.cursor = cleaned[0]
        self.scroll_start = 0

    def clear_filter(self) -> None:
        if self._filter is None:
            return
        self._filter = None
        self.scroll_start = 0

    def is_filtered(self) -> bool:
        return self._filter is not None

    def filtered_indices(self) -> list[int] | None:
        return None if self._filter is None else list(self._filter)

    def count(self) -> int:
        if self._filter is not None:
            return len(self._filter)
        return len(self._files)

    def total_count(self) -> int:
        return len(self._files)

    def display_index_to_file_index(self, display_index: int) -> int:
        if display_index < 0 or display_index >= self.count():
            return -1
        if self._filter is None:
            return display_index
        return self._filter[display_index]

    def file_index_to_display_index(self, file_index: int) -> int:
        if file_index < 0 or file_index >= len(self._files):
            return -1
        if self._filter is None:
            return file_index
        for display_index, candidate in enumerate(self._filter):
            if candidate == file_index:
                return display_index
        return -1

    def display_cursor(self) -> int:
        display = self.file_index_to_display_index(self.cursor)
        return display if display >= 0 else 0

    def _step(self, delta: int) -> bool:
        visible = self.count()
        if visible == 0:
            return False
        target = max(0, min(visible - 1, self.display_cursor() + delta))
        file_index = self.display_index_to_file_index(target)
        if file_index < 0 or file_index == self.cursor:
            return False
        self.cursor = file_index
        return True

    def cursor_up(self) -> bool:
        """Move one visible row up; return True when the selection changed."""
        return self._step(-1)

    def cursor_down(self) -> bool:
        """Move one visible row down; return True when the selection changed."""
        return self._step(1)

    def selected_file(self) -> FileChange | None:
        if 0 <= self.cursor < len(self._files):
            return self._files[self.cursor]
        return None

    def file_at_display(self, display_index: int) -> FileChange | None:
        file_index = self.display_index_to_file_index(display_index)
        if file_index < 0:
            return None
        return self._files[file_index]

    def paths(self) -> list[str]:
        return [change.path for change in self._files]

    def ensure_cursor_visible(self, rows: int) -> None:
        rows = max(1, rows)
        display = self.display_cursor()
        if display < self.scroll_start:
            self.scroll_start = display
        elif display >= self.scroll_start + rows:
            self.scroll_start = display - rows + 1
        max_start = max(0, self.count() - rows)
        self.scroll_start = max(0, min(self.scroll_start, max_start))


__all__ = ["FileListState"]

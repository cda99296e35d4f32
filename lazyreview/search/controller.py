"""Query state and cross-file search over cached diffs.

The controller never loads diffs itself; files without a cached diff are
treated as non-matching until a later search sees them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..diff_cache import DiffCache
from .matcher import LineMatcher, MatcherUnavailable, SubstringLineMatcher, split_diff_lines

logger = logging.getLogger(__name__)


class SearchController:
    """Owns the active query and the ordered set of matching file indices."""

    def __init__(self, matcher: LineMatcher | None = None) -> None:
        self.matcher: LineMatcher = matcher if matcher is not None else SubstringLineMatcher()
        self._active = False
        self._query = ""
        self._filtered_indices: list[int] | None = None
        self._no_matches = False
        self._matcher_error: str | None = None

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def query(self) -> str:
        return self._query

    @property
    def filtered_indices(self) -> list[int] | None:
        if self._filtered_indices is None:
            return None
        return list(self._filtered_indices)

    @property
    def no_matches(self) -> bool:
        return self._no_matches

    @property
    def matcher_error(self) -> str | None:
        return self._matcher_error

    def _clear_results(self) -> None:
        self._filtered_indices = None
        self._no_matches = False

    def activate(self) -> None:
        self._active = True
        self._query = ""
        self._matcher_error = None
        self._clear_results()

    def deactivate(self) -> None:
        self._active = False
        self._query = ""
        self._matcher_error = None
        self._clear_results()

    def set_query(self, query: str) -> None:
        self._query = query

    def search_all_files(self, query: str, ordered_paths: Sequence[str], cache: DiffCache) -> list[int] | None:
        """Filter ``ordered_paths`` down to files whose cached diff matches ``query``.

        Returns the ascending file indices, or ``None`` when nothing is
        filtered (empty query, zero hits, or matcher failure).
        """
        self._query = query
        self._clear_results()
        if not query:
            return None

        matched: list[int] = []
        for index, path in enumerate(ordered_paths):
            diff_text = cache.get(path)
            if not diff_text:
                continue
            try:
                hits = self.matcher.match(query, split_diff_lines(diff_text))
            except MatcherUnavailable as exc:
                logger.debug("matcher unavailable: %s", exc)
                self._matcher_error = str(exc)
                self._no_matches = True
                return None
            if hits:
                matched.append(index)

        self._matcher_error = None
        if not matched:
            self._no_matches = True
            return None
        self._filtered_indices = matched
        return list(matched)

    def search_in_diff(self, query: str, lines: Sequence[str]) -> list[int] | None:
        """Return matching line indices of one diff, or ``None`` when not searchable."""
        if not query or not lines:
            return None
        try:
            return self.matcher.match(query, list(lines))
        except MatcherUnavailable as exc:
            logger.debug("matcher unavailable: %s", exc)
            self._matcher_error = str(exc)
            return None

    def status(self) -> str:
        if self._matcher_error:
            return self._matcher_error
        if self._no_matches:
            return "no matches"
        if self._filtered_indices:
            count = len(self._filtered_indices)
            return "1 file" if count == 1 else f"{count} files"
        return ""


__all__ = ["SearchController"]

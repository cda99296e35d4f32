"""Session-lifetime cache of per-file diff text.

Filled lazily when a file is shown and in bulk when search starts.
Entries are never evicted; every write replaces one key atomically.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping


class DiffCache:
    """Thread-safe ``path -> diff text`` mapping with per-key atomic writes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._diffs: dict[str, str] = {}

    def get(self, path: str) -> str | None:
        with self._lock:
            return self._diffs.get(path)

    def has(self, path: str) -> bool:
        with self._lock:
            return path in self._diffs

    def put(self, path: str, text: str) -> None:
        with self._lock:
            self._diffs[path] = text

    def update(self, diffs: Mapping[str, str]) -> None:
        """Store each entry of ``diffs``; keys land one at a time."""
        for path, text in diffs.items():
            self.put(path, text)

    def missing(self, paths: Iterable[str]) -> list[str]:
        """Return uncached paths in the order given."""
        with self._lock:
            return [path for path in paths if path not in self._diffs]

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._diffs

    def __len__(self) -> int:
        with self._lock:
            return len(self._diffs)


__all__ = ["DiffCache"]

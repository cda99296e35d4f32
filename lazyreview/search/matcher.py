from __future__ import annotations

import shutil
import subprocess
from typing import Protocol

from .. import LazyReviewError

MATCHER_NAMES: tuple[str, ...] = ("substring", "fzf")
DEFAULT_MATCHER = "substring"


class MatcherUnavailable(LazyReviewError):
    """The line-matching backend cannot run (for example ``fzf`` is missing)."""


def split_diff_lines(text: str) -> list[str]:
    """Split diff text into display lines.

    A single trailing newline does not produce an extra empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


class LineMatcher(Protocol):
    name: str

    def match(self, query: str, lines: list[str]) -> list[int]: ...


class SubstringLineMatcher:
    """Case-sensitive substring containment, one hit per line."""

    name = "substring"

    def match(self, query: str, lines: list[str]) -> list[int]:
        if not query or not lines:
            return []
        return [idx for idx, line in enumerate(lines) if query in line]


class FzfLineMatcher:
    """Exact-mode ``fzf --filter`` over ``index:line`` records."""

    name = "fzf"

    def __init__(self, executable: str = "fzf") -> None:
        self.executable = executable

    def match(self, query: str, lines: list[str]) -> list[int]:
        if not query or not lines:
            return []
        fzf_path = shutil.which(self.executable)
        if fzf_path is None:
            raise MatcherUnavailable(f"{self.executable} not found")

        payload = "".join(f"{idx}:{line}\n" for idx, line in enumerate(lines))
        try:
            proc = subprocess.run(
                # --nth keeps the index prefix out of the searched text.
                [fzf_path, "--filter", query, "--exact", "--delimiter", ":", "--nth", "2.."],
                input=payload,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise MatcherUnavailable(f"failed to run {self.executable}: {exc}") from exc

        # fzf exits 1 when nothing matches; output is what counts.
        indices: set[int] = set()
        for raw in proc.stdout.splitlines():
            prefix, sep, _rest = raw.partition(":")
            if not sep:
                continue
            try:
                idx = int(prefix)
            except ValueError:
                continue
            if 0 <= idx < len(lines):
                indices.add(idx)
        # fzf orders by score; "next match" navigation needs line order.
        return sorted(indices)


def make_line_matcher(name: str) -> LineMatcher:
    normalized = name.strip().lower()
    if normalized == "substring":
        return SubstringLineMatcher()
    if normalized == "fzf":
        return FzfLineMatcher()
    raise ValueError(f"unknown matcher: {name!r} (expected one of {', '.join(MATCHER_NAMES)})")

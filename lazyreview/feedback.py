"""Feedback draft editing and diff-cursor to source-line mapping.

``FeedbackDraft`` is the state behind the feedback modal.
``calculate_line_number`` turns a diff cursor into the line a reviewer
means when they comment on it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .ansi import ANSI_ESCAPE_RE

_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
# jj colours line numbers: bright green (92) for added lines, dim (2) for context.
_ANSI_LINE_NUMBER_RE = re.compile(r"(?:\x1b)?\[(?:92(?:;1)?m|2m)\s*(\d+)")
# jj color-words without colour: "   12   13: text" (old, new).
_COLOR_WORDS_RE = re.compile(r"^\s*(\d+)?\s+(\d+)?\s*:")


@dataclass
class FeedbackDraft:
    file_path: str
    line_number: int
    line_content: str = ""
    lines: list[str] = field(default_factory=lambda: [""])

    def text(self) -> str:
        return "\n".join(self.lines)

    def comment(self) -> str:
        return self.text().strip()

    def anchor(self) -> str:
        if self.line_number > 0:
            return f"@{self.file_path}:{self.line_number}"
        return f"@{self.file_path}"

    def insert(self, text: str) -> None:
        for index, part in enumerate(text.split("\n")):
            if index:
                self.newline()
            self.lines[-1] += part

    def newline(self) -> None:
        self.lines.append("")

    def backspace(self) -> None:
        if self.lines[-1]:
            self.lines[-1] = self.lines[-1][:-1]
        elif len(self.lines) > 1:
            self.lines.pop()

    def clear(self) -> None:
        self.lines = [""]


def extract_line_number_from_diff_line(line: str) -> int:
    """Return the new-file line number embedded in a jj diff line, or 0."""
    match = _ANSI_LINE_NUMBER_RE.search(line)
    if match is not None:
        return int(match.group(1))
    plain = ANSI_ESCAPE_RE.sub("", line)
    match = _COLOR_WORDS_RE.match(plain)
    if match is not None:
        new_number = match.group(2) or match.group(1)
        if new_number:
            return int(new_number)
    return 0


def _line_number_from_hunks(lines: list[str], cursor_line: int) -> int:
    old_line = 0
    new_line = 0
    in_hunk = False
    for index, raw in enumerate(lines):
        line = ANSI_ESCAPE_RE.sub("", raw)
        header = _HUNK_RE.match(line)
        if header is not None:
            old_line = int(header.group(1))
            new_line = int(header.group(3))
            in_hunk = True
            if index == cursor_line:
                return new_line
            continue
        if not in_hunk or line.startswith("diff "):
            in_hunk = False
            if index == cursor_line:
                return 0
            continue
        if line.startswith("-"):
            if index == cursor_line:
                return old_line
            old_line += 1
        elif line.startswith("+"):
            if index == cursor_line:
                return new_line
            new_line += 1
        elif line.startswith("\\"):
            if index == cursor_line:
                return max(new_line - 1, 0)
        else:
            if index == cursor_line:
                return new_line
            old_line += 1
            new_line += 1
    return 0


def calculate_line_number(diff_text: str, cursor_line: int) -> int:
    """Map a 0-indexed diff cursor to a 1-indexed source line.

    Unified diffs are resolved through their hunk headers. Other formats fall
    back to line numbers printed inside the diff line, then to
    ``cursor_line + 1``.
    """
    lines = diff_text.split("\n")
    if cursor_line < 0 or cursor_line >= len(lines):
        return cursor_line + 1
    if any(_HUNK_RE.match(ANSI_ESCAPE_RE.sub("", line)) for line in lines):
        number = _line_number_from_hunks(lines, cursor_line)
        if number > 0:
            return number
    number = extract_line_number_from_diff_line(lines[cursor_line])
    if number > 0:
        return number
    return cursor_line + 1


__all__ = [
    "FeedbackDraft",
    "calculate_line_number",
    "extract_line_number_from_diff_line",
]

"""Diff line classification, colouring, and sanitization.

Line kinds come from the Pygments diff lexer. Lines that already carry ANSI
colour (jj output) are passed through unchanged.
Also neutralizes terminal control bytes to avoid unsafe side effects.
"""

from __future__ import annotations

import re

from pygments.lexers import DiffLexer
from pygments.token import Generic

from .ui_theme import UITheme

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x0d\x0e-\x1a\x1c-\x1f\x7f-\x9f]")
_SGR_RE = re.compile(r"\x1b\[[0-9;]*m")
_ESCAPE_RE = re.compile(r"\x1b")

_DIFF_LEXER: DiffLexer | None = None

DIFF_LINE_KINDS = ("add", "remove", "hunk", "meta", "context")


def _diff_lexer() -> DiffLexer:
    global _DIFF_LEXER
    if _DIFF_LEXER is None:
        _DIFF_LEXER = DiffLexer()
    return _DIFF_LEXER


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.).

    SGR colour sequences survive; any other escape is made visible.
    """
    if _CONTROL_RE.search(source) is None and not _has_foreign_escape(source):
        return source

    out: list[str] = []
    index = 0
    while index < len(source):
        sgr = _SGR_RE.match(source, index)
        if sgr is not None:
            out.append(sgr.group(0))
            index = sgr.end()
            continue
        ch = source[index]
        code = ord(ch)
        index += 1
        if ch in {"\n", "\t"}:
            out.append(ch)
            continue
        if ch == "\r":
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _has_foreign_escape(source: str) -> bool:
    return len(_ESCAPE_RE.findall(source)) != len(_SGR_RE.findall(source))


def classify_diff_line(line: str) -> str:
    """Return one of ``DIFF_LINE_KINDS`` for a plain diff line."""
    if line.startswith(("+++", "---")):
        return "meta"
    for token_type, _value in _diff_lexer().get_tokens(line + "\n"):
        if token_type in Generic.Inserted:
            return "add"
        if token_type in Generic.Deleted:
            return "remove"
        if token_type in Generic.Subheading:
            return "hunk"
        if token_type in Generic.Heading:
            return "meta"
        break
    return "context"


def style_diff_line(line: str, theme: UITheme) -> str:
    """Colour one diff line with ``theme``; pre-coloured lines are kept as-is."""
    if "\x1b[" in line:
        return line
    color = {
        "add": theme.diff_add,
        "remove": theme.diff_remove,
        "hunk": theme.diff_hunk,
        "meta": theme.diff_meta,
        "context": theme.diff_context,
    }[classify_diff_line(line)]
    if not color:
        return line
    return f"{color}{line}{theme.reset}"


__all__ = [
    "DIFF_LINE_KINDS",
    "classify_diff_line",
    "sanitize_terminal_text",
    "style_diff_line",
]

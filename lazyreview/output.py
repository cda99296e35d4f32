"""Markdown feedback output.

Each saved comment is appended as an ``@path:line`` header followed by the
comment text and a blank separator line.
"""

from __future__ import annotations

from pathlib import Path

from . import LazyReviewError


class OutputError(LazyReviewError):
    """Feedback output path is invalid or could not be written."""


def format_feedback(file_path: str, line: int, comment: str) -> str:
    """Return one feedback record; ``line <= 0`` omits the line suffix."""
    anchor = f"@{file_path}:{line}" if line > 0 else f"@{file_path}"
    return f"{anchor}\n{comment.strip()}\n\n"


def append_feedback(output_path: Path, file_path: str, line: int, comment: str) -> None:
    """Append one feedback record, creating parent directories when missing."""
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(f"failed to create directory: {exc}") from exc
    try:
        with output_path.open("a", encoding="utf-8") as handle:
            handle.write(format_feedback(file_path, line, comment))
    except OSError as exc:
        raise OutputError(f"failed to write feedback: {exc}") from exc


def validate_output_path(path: Path | str) -> Path:
    """Check that ``path`` names a ``.md`` file in a usable directory.

    A parent directory that does not exist yet is accepted; it is created on
    the first append.
    """
    if not str(path):
        raise OutputError("output path is required")
    target = Path(path)
    if target.suffix.lower() != ".md":
        raise OutputError("output file must have .md extension")
    parent = target.parent
    if parent.exists() and not parent.is_dir():
        raise OutputError(f"{parent} is not a directory")
    return target


__all__ = ["OutputError", "append_feedback", "format_feedback", "validate_output_path"]

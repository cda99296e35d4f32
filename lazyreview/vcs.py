"""Version-control backends for changed-file listing and per-file diffs.

Detects Jujutsu or Git in a working directory and wraps their CLIs.
Every backend exposes the same small surface: changed files plus diff text.
"""

from __future__ import annotations

import enum
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from . import LazyReviewError

JJ_BASE_REVSET = "coalesce(heads(::@ & bookmarks()), trunk())"
_JJ_BASE_HINT = (
    "Hint: Create a bookmark at your branch point, or ensure a 'main', "
    "'master', or 'trunk' bookmark exists"
)


class VCSError(LazyReviewError):
    """A VCS command failed or no repository was found."""


class FileStatus(str, enum.Enum):
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"

    @classmethod
    def parse(cls, token: str) -> FileStatus:
        """Map a status letter (``R100`` etc. included) to a known status."""
        letter = token.strip()[:1].upper()
        for status in cls:
            if status.value == letter:
                return status
        return cls.MODIFIED


@dataclass(frozen=True)
class FileChange:
    path: str
    status: FileStatus


class VCS(Protocol):
    name: str

    def changed_files(self) -> list[FileChange]: ...

    def diff(self, path: str) -> str: ...

    def diff_all(self) -> str: ...


def _run(cmd: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise VCSError(f"failed to run {cmd[0]}: {exc}") from exc


def _checked_output(cmd: list[str], cwd: Path, label: str) -> str:
    proc = _run(cmd, cwd)
    if proc.returncode != 0:
        detail = proc.stderr.strip() or f"exit code {proc.returncode}"
        raise VCSError(f"{label} failed: {detail}")
    return proc.stdout


def parse_git_name_status(output: str) -> list[FileChange]:
    """Parse ``git diff --name-status`` output (``M\\tpath``)."""
    changes: list[FileChange] = []
    for raw in output.strip().splitlines():
        line = raw.strip()
        if not line:
            continue
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        # Renames and copies list "old\tnew"; the new path is what diffs resolve.
        changes.append(FileChange(path=parts[-1].strip(), status=FileStatus.parse(parts[0])))
    return changes


def parse_jj_summary(output: str) -> list[FileChange]:
    """Parse ``jj diff --summary`` output (``M path``)."""
    changes: list[FileChange] = []
    for raw in output.strip().splitlines():
        line = raw.strip()
        if not line:
            continue
        parts = line.split(" ", 1)
        if len(parts) < 2:
            continue
        changes.append(FileChange(path=parts[1].strip(), status=FileStatus.parse(parts[0])))
    return changes


class GitVCS:
    """Staged plus unstaged working-copy changes of a git repository."""

    name = "git"

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def changed_files(self) -> list[FileChange]:
        staged = parse_git_name_status(
            _checked_output(["git", "diff", "--cached", "--name-status"], self.directory, "git diff --cached")
        )
        unstaged = parse_git_name_status(
            _checked_output(["git", "diff", "--name-status"], self.directory, "git diff")
        )
        staged_paths = {change.path for change in staged}
        return staged + [change for change in unstaged if change.path not in staged_paths]

    def _combined(self, extra_args: list[str]) -> str:
        chunks: list[str] = []
        errors: list[str] = []
        for label, args in (("staged diff", ["--cached"]), ("unstaged diff", [])):
            proc = _run(["git", "diff", *args, *extra_args], self.directory)
            if proc.returncode != 0:
                errors.append(f"{label}: {proc.stderr.strip() or proc.returncode}")
            chunks.append(proc.stdout)
        output = "".join(chunks)
        if len(errors) == 2 and not output:
            raise VCSError(f"git diff failed: {'; '.join(errors)}")
        return output

    def diff(self, path: str) -> str:
        return self._combined(["--", path])

    def diff_all(self) -> str:
        return self._combined([])


class JJVCS:
    """Changes between the nearest bookmarked ancestor (or trunk) and ``@``."""

    name = "jj"

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._base_lock = threading.Lock()
        self._base_resolved = False
        self._base_rev = ""
        self._base_error: VCSError | None = None

    def resolve_base(self) -> str:
        """Resolve and cache the base revision; only one ``jj log`` per session."""
        with self._base_lock:
            if not self._base_resolved:
                self._base_resolved = True
                try:
                    self._base_rev = self._query_base()
                except VCSError as exc:
                    self._base_error = exc
        if self._base_error is not None:
            raise self._base_error
        return self._base_rev

    def _query_base(self) -> str:
        proc = _run(
            ["jj", "log", "-r", JJ_BASE_REVSET, "-T", "commit_id", "--no-graph", "--limit", "1"],
            self.directory,
        )
        if proc.returncode != 0:
            raise VCSError(f"failed to resolve base revision: {proc.stderr.strip()}\n{_JJ_BASE_HINT}")
        commit_id = proc.stdout.strip()
        if not commit_id:
            raise VCSError(
                "no base revision found: no bookmarks in ancestry and trunk() not found\n" + _JJ_BASE_HINT
            )
        return commit_id

    def changed_files(self) -> list[FileChange]:
        base = self.resolve_base()
        output = _checked_output(
            ["jj", "diff", "--from", base, "--to", "@", "--summary"],
            self.directory,
            "jj diff --summary",
        )
        return parse_jj_summary(output)

    def diff(self, path: str) -> str:
        base = self.resolve_base()
        return _checked_output(["jj", "diff", "--from", base, "--to", "@", path], self.directory, f"jj diff {path}")

    def diff_all(self) -> str:
        base = self.resolve_base()
        return _checked_output(["jj", "diff", "--from", base, "--to", "@"], self.directory, "jj diff")


def detect_vcs(directory: Path) -> VCS:
    """Return the VCS for ``directory``, preferring jj over git."""
    root = directory.resolve()
    if (root / ".jj").exists():
        return JJVCS(root)
    if (root / ".git").exists():
        return GitVCS(root)
    raise VCSError(f"no VCS found (looking for .jj or .git in {root})")


__all__ = [
    "FileChange",
    "FileStatus",
    "GitVCS",
    "JJVCS",
    "VCS",
    "VCSError",
    "detect_vcs",
    "parse_git_name_status",
    "parse_jj_summary",
]

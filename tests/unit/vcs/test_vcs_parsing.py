"""VCS output parsing, detection, and command failure handling."""

from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyreview.vcs import (
    FileChange,
    FileStatus,
    GitVCS,
    JJVCS,
    VCSError,
    detect_vcs,
    parse_git_name_status,
    parse_jj_summary,
)


def _proc(args: list[str], stdout: str = "", returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=args, returncode=returncode, stdout=stdout, stderr=stderr)


class StatusParsingTests(unittest.TestCase):
    def test_git_name_status_uses_new_path_for_renames(self) -> None:
        output = "M\ta.go\nA\tb.go\nR100\told.go\tnew.go\n\nD\tgone.go\n"
        self.assertEqual(
            parse_git_name_status(output),
            [
                FileChange("a.go", FileStatus.MODIFIED),
                FileChange("b.go", FileStatus.ADDED),
                FileChange("new.go", FileStatus.RENAMED),
                FileChange("gone.go", FileStatus.DELETED),
            ],
        )

    def test_jj_summary_keeps_spaces_in_paths(self) -> None:
        output = "M src/a.go\nA docs/read me.md\nD gone.go\n"
        self.assertEqual(
            [(change.path, change.status.value) for change in parse_jj_summary(output)],
            [("src/a.go", "M"), ("docs/read me.md", "A"), ("gone.go", "D")],
        )

    def test_malformed_lines_are_skipped(self) -> None:
        self.assertEqual(parse_git_name_status("M\n\n"), [])
        self.assertEqual(parse_jj_summary("M\n"), [])

    def test_unknown_status_letters_read_as_modified(self) -> None:
        self.assertIs(FileStatus.parse("C75"), FileStatus.MODIFIED)
        self.assertIs(FileStatus.parse("r"), FileStatus.RENAMED)


class DetectVcsTests(unittest.TestCase):
    def test_jj_is_preferred_over_git(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".git").mkdir()
            self.assertIsInstance(detect_vcs(root), GitVCS)
            (root / ".jj").mkdir()
            self.assertIsInstance(detect_vcs(root), JJVCS)

    def test_missing_repository_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaisesRegex(VCSError, "no VCS found"):
                detect_vcs(Path(tmp))


class GitVCSTests(unittest.TestCase):
    def test_staged_entries_win_over_unstaged_duplicates(self) -> None:
        outputs = {
            ("git", "diff", "--cached", "--name-status"): "A\ta.go\n",
            ("git", "diff", "--name-status"): "M\ta.go\nM\tb.go\n",
        }
        with mock.patch("lazyreview.vcs._run", side_effect=lambda cmd, _cwd: _proc(cmd, outputs[tuple(cmd)])):
            changes = GitVCS(Path(".")).changed_files()

        self.assertEqual(changes, [FileChange("a.go", FileStatus.ADDED), FileChange("b.go", FileStatus.MODIFIED)])

    def test_diff_concatenates_staged_and_unstaged(self) -> None:
        calls: list[list[str]] = []

        def run(cmd: list[str], _cwd: Path) -> subprocess.CompletedProcess:
            calls.append(cmd)
            return _proc(cmd, "staged\n" if "--cached" in cmd else "unstaged\n")

        with mock.patch("lazyreview.vcs._run", side_effect=run):
            text = GitVCS(Path(".")).diff("a.go")

        self.assertEqual(text, "staged\nunstaged\n")
        self.assertEqual(calls[0], ["git", "diff", "--cached", "--", "a.go"])

    def test_diff_fails_only_when_both_halves_fail(self) -> None:
        def run(cmd: list[str], _cwd: Path) -> subprocess.CompletedProcess:
            return _proc(cmd, returncode=128, stderr="fatal: bad")

        with mock.patch("lazyreview.vcs._run", side_effect=run):
            with self.assertRaisesRegex(VCSError, "git diff failed"):
                GitVCS(Path(".")).diff_all()

    def test_listing_failure_carries_stderr(self) -> None:
        with mock.patch(
            "lazyreview.vcs._run",
            side_effect=lambda cmd, _cwd: _proc(cmd, returncode=1, stderr="not a git repository"),
        ):
            with self.assertRaisesRegex(VCSError, "not a git repository"):
                GitVCS(Path(".")).changed_files()

    def test_missing_executable_is_a_vcs_error(self) -> None:
        with mock.patch("lazyreview.vcs.subprocess.run", side_effect=FileNotFoundError("git")):
            with self.assertRaisesRegex(VCSError, "failed to run git"):
                GitVCS(Path(".")).changed_files()


class JJVCSTests(unittest.TestCase):
    def test_base_revision_is_resolved_once(self) -> None:
        calls: list[list[str]] = []

        def run(cmd: list[str], _cwd: Path) -> subprocess.CompletedProcess:
            calls.append(cmd)
            if cmd[1] == "log":
                return _proc(cmd, "abc123\n")
            return _proc(cmd, "M a.go\n")

        with mock.patch("lazyreview.vcs._run", side_effect=run):
            vcs = JJVCS(Path("."))
            vcs.changed_files()
            vcs.diff("a.go")

        self.assertEqual([cmd[1] for cmd in calls], ["log", "diff", "diff"])
        self.assertEqual(calls[2], ["jj", "diff", "--from", "abc123", "--to", "@", "a.go"])

    def test_missing_base_raises_with_hint_every_time(self) -> None:
        calls: list[list[str]] = []

        def run(cmd: list[str], _cwd: Path) -> subprocess.CompletedProcess:
            calls.append(cmd)
            return _proc(cmd, "")

        with mock.patch("lazyreview.vcs._run", side_effect=run):
            vcs = JJVCS(Path("."))
            with self.assertRaisesRegex(VCSError, "no base revision found"):
                vcs.changed_files()
            with self.assertRaisesRegex(VCSError, "Hint"):
                vcs.diff_all()

        self.assertEqual(len(calls), 1)


if __name__ == "__main__":
    unittest.main()

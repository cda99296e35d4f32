"""State holders behind the file list and diff panes."""

from .diff import DiffViewState
from .files import FileListState

__all__ = ["DiffViewState", "FileListState"]

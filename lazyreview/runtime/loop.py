"""Main interactive event loop for the terminal UI.

Alternates between applying background loader events, rendering, and
reading one key. Feature logic lives in the injected callbacks.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = 120


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``.

    Keeping the loop callback-driven isolates feature logic outside the core
    event loop and makes behavior easier to unit test.
    """

    pump_events: Callable[[], int]
    sync_layout: Callable[[int, int], None]
    needs_render: Callable[[], bool]
    render: Callable[[int, int], None]
    handle_key: Callable[[str], bool]


def normalize_enter(key: str, skip_next_lf: bool) -> tuple[str | None, bool]:
    """Map raw Enter tokens to ``ENTER``/``CTRL_J``.

    Terminals that send CR LF for Enter would otherwise produce a stray
    ``CTRL_J``; the LF directly after a CR is dropped. Returns the key to
    dispatch (``None`` to drop it) and the new skip flag.
    """
    if key == "ENTER_CR":
        return "ENTER", True
    if key == "ENTER_LF":
        if skip_next_lf:
            return None, False
        return "CTRL_J", False
    return key, False


def run_main_loop(
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the main interactive TUI loop until a key handler asks to quit."""
    ops = callbacks
    last_size: tuple[int, int] | None = None
    skip_next_lf = False

    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            resized = size != last_size
            last_size = size

            ops.pump_events()
            ops.sync_layout(term.columns, term.lines)
            if resized or ops.needs_render():
                ops.render(term.columns, term.lines)

            try:
                key = read_key(stdin_fd, timeout_ms=timing.key_timeout_ms)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue

            dispatch_key, skip_next_lf = normalize_enter(key, skip_next_lf)
            if dispatch_key is None:
                continue
            if ops.handle_key(dispatch_key):
                break


__all__ = ["RuntimeLoopCallbacks", "RuntimeLoopTiming", "normalize_enter", "run_main_loop"]

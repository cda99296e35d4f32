from __future__ import annotations

import unittest
from contextlib import contextmanager
from unittest import mock

from lazyreview.runtime.loop import RuntimeLoopCallbacks, RuntimeLoopTiming, normalize_enter, run_main_loop
from lazyreview.runtime.terminal import TerminalController


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


def _callbacks(handled: list[str], **overrides) -> RuntimeLoopCallbacks:
    values = dict(
        pump_events=lambda: 0,
        sync_layout=lambda _columns, _lines: None,
        needs_render=lambda: False,
        render=lambda _columns, _lines: None,
        handle_key=lambda key: handled.append(key) or key == "q",
    )
    values.update(overrides)
    return RuntimeLoopCallbacks(**values)


def _run(keys: list, callbacks: RuntimeLoopCallbacks, terminal=None) -> None:
    sequence = iter(keys)

    def next_key(*_args, **_kwargs):
        item = next(sequence)
        if isinstance(item, BaseException):
            raise item
        return item

    with mock.patch(
        "lazyreview.runtime.loop.shutil.get_terminal_size",
        return_value=mock.Mock(columns=100, lines=30),
    ), mock.patch("lazyreview.runtime.loop.read_key", side_effect=next_key):
        run_main_loop(
            terminal or _FakeTerminal(),  # type: ignore[arg-type]
            0,
            RuntimeLoopTiming(key_timeout_ms=10),
            callbacks,
        )


class NormalizeEnterTests(unittest.TestCase):
    def test_carriage_return_is_enter_and_arms_lf_skip(self) -> None:
        self.assertEqual(normalize_enter("ENTER_CR", False), ("ENTER", True))

    def test_lf_after_cr_is_dropped(self) -> None:
        self.assertEqual(normalize_enter("ENTER_LF", True), (None, False))

    def test_bare_lf_is_ctrl_j(self) -> None:
        self.assertEqual(normalize_enter("ENTER_LF", False), ("CTRL_J", False))

    def test_other_keys_pass_through_and_disarm_skip(self) -> None:
        self.assertEqual(normalize_enter("x", True), ("x", False))


class RuntimeLoopBehaviorTests(unittest.TestCase):
    def test_loop_exits_when_handler_requests_quit(self) -> None:
        handled: list[str] = []
        terminal = _FakeTerminal()

        _run(["a", "q", "never"], _callbacks(handled), terminal)

        self.assertEqual(handled, ["a", "q"])
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))

    def test_timeouts_and_interrupts_are_not_dispatched(self) -> None:
        handled: list[str] = []

        _run(["", KeyboardInterrupt(), "", "q"], _callbacks(handled))

        self.assertEqual(handled, ["q"])

    def test_cr_lf_pair_dispatches_single_enter(self) -> None:
        handled: list[str] = []

        _run(["ENTER_CR", "ENTER_LF", "ENTER_LF", "q"], _callbacks(handled))

        self.assertEqual(handled, ["ENTER", "CTRL_J", "q"])

    def test_first_iteration_renders_then_only_when_dirty(self) -> None:
        handled: list[str] = []
        renders: list[tuple[int, int]] = []
        dirty = iter([False, True, False])

        _run(
            ["a", "b", "q"],
            _callbacks(
                handled,
                needs_render=lambda: next(dirty),
                render=lambda columns, lines: renders.append((columns, lines)),
            ),
        )

        self.assertEqual(renders, [(100, 30), (100, 30)])

    def test_events_are_pumped_before_each_key_read(self) -> None:
        handled: list[str] = []
        pumps: list[int] = []

        _run(["a", "q"], _callbacks(handled, pump_events=lambda: pumps.append(1) or 0))

        self.assertEqual(len(pumps), 2)

    def test_terminal_mode_is_restored_when_handler_raises(self) -> None:
        terminal = _FakeTerminal()

        def explode(_key: str) -> bool:
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            _run(["x"], _callbacks([], handle_key=explode), terminal)

        self.assertEqual(terminal.exited, 1)


class TerminalControllerTests(unittest.TestCase):
    def test_raw_mode_brackets_alternate_screen_sequences(self) -> None:
        writes: list[bytes] = []
        with mock.patch("lazyreview.runtime.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "lazyreview.runtime.terminal.tty.setraw"
        ), mock.patch("lazyreview.runtime.terminal.termios.tcsetattr") as tcsetattr, mock.patch(
            "lazyreview.runtime.terminal.os.write",
            side_effect=lambda _fd, data: writes.append(data) or len(data),
        ):
            terminal = TerminalController(stdin_fd=0, stdout_fd=1)
            with terminal.raw_mode():
                self.assertTrue(terminal.active)

        self.assertFalse(terminal.active)
        self.assertEqual(writes[0], b"\x1b[?1049h\x1b[?25l")
        self.assertEqual(writes[-1], b"\x1b[0m\x1b[?25h\x1b[?1049l")
        tcsetattr.assert_called_once()


if __name__ == "__main__":
    unittest.main()

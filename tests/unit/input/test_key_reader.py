"""Raw-key decoding from a pipe standing in for the terminal."""

from __future__ import annotations

import os
import time
import unittest

from lazyreview.input import reader


def _read_all(data: bytes, count: int) -> list[str]:
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, data)
        return [reader.read_key(read_fd, timeout_ms=20) for _ in range(count)]
    finally:
        os.close(read_fd)
        os.close(write_fd)


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        reader._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        reader._PENDING_BYTES.clear()

    def test_lone_escape_returns_promptly(self) -> None:
        started = time.monotonic()
        self.assertEqual(_read_all(b"\x1b", 1), ["ESC"])
        self.assertLess(time.monotonic() - started, 0.2)

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(_read_all(b"", 1), [""])

    def test_control_keys_map_to_named_tokens(self) -> None:
        keys = _read_all(b"\x0e\x10\x16\x15\x03\x7f\x08\r\n", 9)
        self.assertEqual(
            keys,
            ["CTRL_N", "CTRL_P", "CTRL_V", "CTRL_U", "CTRL_C", "BACKSPACE", "BACKSPACE", "ENTER_CR", "ENTER_LF"],
        )

    def test_arrow_and_paging_sequences(self) -> None:
        keys = _read_all(b"\x1b[A\x1b[B\x1b[5~\x1b[6~\x1bOH\x1b[F", 6)
        self.assertEqual(keys, ["UP", "DOWN", "PAGE_UP", "PAGE_DOWN", "HOME", "END"])

    def test_emacs_meta_keys(self) -> None:
        self.assertEqual(_read_all(b"\x1bv\x1b<\x1b>", 3), ["ALT_V", "ALT_LT", "ALT_GT"])

    def test_alt_modified_arrows(self) -> None:
        self.assertEqual(_read_all(b"\x1b[1;3A\x1b[1;3B", 2), ["ALT_UP", "ALT_DOWN"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(_read_all(b"\x1bx", 2), ["ESC", "x"])

    def test_multibyte_utf8_character_is_one_token(self) -> None:
        self.assertEqual(_read_all("é/".encode("utf-8"), 2), ["é", "/"])


if __name__ == "__main__":
    unittest.main()

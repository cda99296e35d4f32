from __future__ import annotations

import unittest

from lazyreview.ansi import clip_ansi_line, display_width, fit_ansi_line, truncate_left


class AnsiWidthTests(unittest.TestCase):
    def test_escape_sequences_do_not_count(self) -> None:
        self.assertEqual(display_width("\033[31mabc\033[0m"), 3)

    def test_wide_characters_take_two_columns(self) -> None:
        self.assertEqual(display_width("日本"), 4)

    def test_clip_keeps_escapes_and_stops_before_wide_overflow(self) -> None:
        self.assertEqual(clip_ansi_line("\033[1mab日\033[0m", 3), "\033[1mab")

    def test_clip_expands_tabs(self) -> None:
        self.assertEqual(clip_ansi_line("a\tb", 10), "a       b")

    def test_fit_pads_and_resets_styled_text(self) -> None:
        self.assertEqual(fit_ansi_line("ab", 4), "ab  ")
        self.assertEqual(fit_ansi_line("\033[1mabcdef", 3), "\033[1mabc\033[0m")

    def test_truncate_left_keeps_tail(self) -> None:
        self.assertEqual(truncate_left("src/pkg/module.go", 12), "...module.go")
        self.assertEqual(truncate_left("short.go", 12), "short.go")
        self.assertEqual(truncate_left("abcdef", 2), "ab")


if __name__ == "__main__":
    unittest.main()

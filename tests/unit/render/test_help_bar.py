from __future__ import annotations

import unittest

from lazyreview.ansi import display_width
from lazyreview.render.help import (
    HELP_HINTS_FEEDBACK,
    HELP_HINTS_NORMAL,
    HELP_HINTS_SEARCH,
    help_hints,
    render_help_bar,
)
from lazyreview.ui_theme import DEFAULT_THEME, PLAIN_THEME


class HelpBarTests(unittest.TestCase):
    def test_modal_hints_win_over_search_hints(self) -> None:
        self.assertIs(help_hints(modal_open=True, search_active=True), HELP_HINTS_FEEDBACK)
        self.assertIs(help_hints(modal_open=False, search_active=True), HELP_HINTS_SEARCH)
        self.assertIs(help_hints(modal_open=False, search_active=False), HELP_HINTS_NORMAL)

    def test_bar_is_centered_and_padded(self) -> None:
        bar = render_help_bar(60, PLAIN_THEME, modal_open=True)
        self.assertEqual(display_width(bar), 60)
        self.assertEqual(bar.strip(), "enter save  C-j newline  esc cancel")
        leading = len(bar) - len(bar.lstrip(" "))
        self.assertEqual(leading, (60 - 35) // 2)

    def test_narrow_bar_is_clipped_to_width(self) -> None:
        bar = render_help_bar(20, DEFAULT_THEME, search_active=True)
        self.assertEqual(display_width(bar), 20)


if __name__ == "__main__":
    unittest.main()

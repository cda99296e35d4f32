"""Diff view cursor movement and per-diff match cycling."""

from __future__ import annotations

import unittest

from lazyreview.panels import DiffViewState


def _view(line_count: int = 20) -> DiffViewState:
    view = DiffViewState()
    view.set_diff("a.go", "".join(f"line {index}\n" for index in range(line_count)))
    return view


class DiffViewMatchTests(unittest.TestCase):
    def test_next_match_wraps_around(self) -> None:
        view = _view()
        view.set_search_matches([5, 10, 15])
        self.assertEqual((view.current_match, view.cursor), (0, 5))

        view.next_match()
        self.assertEqual((view.current_match, view.cursor), (1, 10))
        view.next_match()
        self.assertEqual((view.current_match, view.cursor), (2, 15))
        view.next_match()
        self.assertEqual((view.current_match, view.cursor), (0, 5))

    def test_prev_match_wraps_to_last(self) -> None:
        view = _view()
        view.set_search_matches([5, 10, 15])
        view.prev_match()
        self.assertEqual((view.current_match, view.cursor), (2, 15))

    def test_cycling_visits_each_match_once_per_round(self) -> None:
        view = _view()
        view.set_search_matches([1, 4, 9, 12])
        seen = []
        for _ in range(4):
            view.next_match()
            seen.append(view.current_match)
        self.assertEqual(sorted(seen), [0, 1, 2, 3])

    def test_cycling_with_zero_matches_is_noop(self) -> None:
        view = _view()
        view.cursor_down()
        view.set_search_matches([])
        view.next_match()
        view.prev_match()
        self.assertIsNone(view.current_match)
        self.assertEqual(view.cursor, 1)

    def test_match_status_round_trip(self) -> None:
        view = _view()
        view.set_search_matches([2, 3, 7])
        self.assertEqual(view.match_status(), "1/3")
        view.next_match()
        self.assertEqual(view.match_status(), "2/3")
        view.set_search_matches([])
        self.assertEqual(view.match_status(), "no matches")

    def test_matcher_error_takes_precedence_in_status(self) -> None:
        view = _view()
        view.set_search_matches([2])
        view.matcher_error = "fzf not found"
        self.assertEqual(view.match_status(), "fzf not found")

    def test_line_predicates(self) -> None:
        view = _view()
        view.set_search_matches([2, 6])
        self.assertTrue(view.is_line_matched(6))
        self.assertFalse(view.is_line_matched(3))
        self.assertTrue(view.is_current_match(2))
        self.assertFalse(view.is_current_match(6))

    def test_set_diff_while_searching_discards_previous_matches(self) -> None:
        view = _view()
        view.activate_search()
        view.set_search_matches([1, 2, 3])

        view.set_diff("b.go", "other\ncontent\n")

        self.assertIsNone(view.current_match)
        self.assertEqual(view.matches, [])
        self.assertEqual(view.cursor, 0)
        self.assertEqual(view.lines, ["other", "content"])

    def test_clear_search_drops_matches(self) -> None:
        view = _view()
        view.activate_search()
        view.set_search_matches([4])
        view.clear_search()
        self.assertFalse(view.searching)
        self.assertFalse(view.is_line_matched(4))


class DiffViewNavigationTests(unittest.TestCase):
    def test_cursor_clamps_at_both_ends(self) -> None:
        view = _view(3)
        view.cursor_up()
        self.assertEqual(view.cursor, 0)
        view.goto_bottom()
        view.cursor_down()
        self.assertEqual(view.cursor, 2)

    def test_paging_moves_by_page_and_clamps(self) -> None:
        view = _view(30)
        view.page_down(10)
        self.assertEqual(view.cursor, 10)
        view.page_down(50)
        self.assertEqual(view.cursor, 29)
        view.page_up(10)
        self.assertEqual(view.cursor, 19)
        view.goto_top()
        self.assertEqual(view.cursor, 0)

    def test_navigation_on_empty_diff_stays_at_zero(self) -> None:
        view = DiffViewState()
        view.cursor_down()
        view.goto_bottom()
        self.assertEqual(view.cursor, 0)
        self.assertEqual(view.current_line_content(), "")

    def test_ensure_cursor_visible_scrolls_viewport(self) -> None:
        view = _view(50)
        view.page_down(30)
        view.ensure_cursor_visible(10)
        self.assertEqual(view.scroll_start, 21)
        view.goto_top()
        view.ensure_cursor_visible(10)
        self.assertEqual(view.scroll_start, 0)

    def test_loading_state_is_cleared_by_set_diff(self) -> None:
        view = DiffViewState()
        view.set_loading("a.go")
        self.assertTrue(view.loading)
        self.assertEqual(view.path, "a.go")
        view.set_diff("a.go", "+x\n")
        self.assertFalse(view.loading)
        self.assertEqual(view.content(), "+x\n")
        self.assertEqual(view.current_line_content(), "+x")


if __name__ == "__main__":
    unittest.main()

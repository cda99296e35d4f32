"""Key dispatch for normal, search, and feedback modes.

Handlers return ``True`` to quit, ``False`` when the key was consumed, and
``None`` when the mode does not bind the key.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..feedback import FeedbackDraft
from ..runtime.coordinator import ReviewCoordinator
from .key_registry import KeyComboRegistry


def is_text_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


@dataclass(frozen=True)
class ReviewKeyContext:
    """Coordinator plus the geometry callbacks page movement needs."""

    coordinator: ReviewCoordinator
    diff_page_rows: Callable[[], int]


def _feedback_registry(context: ReviewKeyContext, draft: FeedbackDraft) -> KeyComboRegistry:
    coordinator = context.coordinator

    def save() -> bool:
        coordinator.save_feedback()
        return False

    def cancel() -> bool:
        coordinator.cancel_feedback()
        return False

    def edit(action: Callable[[], None]) -> Callable[[], bool]:
        def run() -> bool:
            action()
            coordinator.dirty = True
            return False

        return run

    def insert(key: str) -> bool:
        if not is_text_key(key):
            return False
        draft.insert(key)
        coordinator.dirty = True
        return False

    return (
        KeyComboRegistry(fallback=insert)
        .register(("ENTER",), save)
        .register(("ESC",), cancel)
        .register(("CTRL_J",), edit(draft.newline))
        .register(("BACKSPACE",), edit(draft.backspace))
        .register(("CTRL_U",), edit(draft.clear))
        .register(("CTRL_C",), lambda: True)
    )


def _search_registry(context: ReviewKeyContext) -> KeyComboRegistry:
    coordinator = context.coordinator

    def set_query(query: str) -> bool:
        coordinator.edit_query(query)
        return False

    def insert(key: str) -> bool:
        if not is_text_key(key):
            return False
        return set_query(coordinator.search.query + key)

    def backspace() -> bool:
        return set_query(coordinator.search.query[:-1])

    def close() -> bool:
        coordinator.deactivate_search()
        return False

    def next_match() -> bool:
        coordinator.next_match()
        return False

    def prev_match() -> bool:
        coordinator.prev_match()
        return False

    def move_file(delta: int) -> Callable[[], bool]:
        def run() -> bool:
            coordinator.move_file_cursor(delta)
            return False

        return run

    return (
        KeyComboRegistry(fallback=insert)
        .register(("ESC",), close)
        .register(("ENTER", "CTRL_N"), next_match)
        .register(("CTRL_P",), prev_match)
        .register(("BACKSPACE",), backspace)
        .register(("CTRL_U",), lambda: set_query(""))
        .register(("UP",), move_file(-1))
        .register(("DOWN",), move_file(1))
        .register(("CTRL_C",), lambda: True)
    )


def _normal_registry(context: ReviewKeyContext) -> KeyComboRegistry:
    coordinator = context.coordinator

    def diff_action(action: str) -> Callable[[], bool]:
        def run() -> bool:
            coordinator.move_diff_cursor(action, context.diff_page_rows())
            return False

        return run

    def move_file(delta: int) -> Callable[[], bool]:
        def run() -> bool:
            coordinator.move_file_cursor(delta)
            return False

        return run

    def open_search() -> bool:
        coordinator.activate_search()
        return False

    def open_feedback() -> bool:
        coordinator.open_feedback()
        return False

    def quit_app() -> bool:
        coordinator.request_quit()
        return True

    return (
        KeyComboRegistry()
        .register(("q", "CTRL_C"), quit_app)
        .register(("UP",), move_file(-1))
        .register(("DOWN",), move_file(1))
        .register(("CTRL_N", "ALT_DOWN"), diff_action("down"))
        .register(("CTRL_P", "ALT_UP"), diff_action("up"))
        .register(("CTRL_V", "PAGE_DOWN"), diff_action("page_down"))
        .register(("ALT_V", "PAGE_UP"), diff_action("page_up"))
        .register(("ALT_LT", "HOME"), diff_action("top"))
        .register(("ALT_GT", "END"), diff_action("bottom"))
        .register(("/",), open_search)
        .register(("ENTER",), open_feedback)
    )


def handle_review_key(key: str, context: ReviewKeyContext) -> bool:
    """Handle one key in the active mode and return ``True`` when app should quit."""
    coordinator = context.coordinator
    # Any key press dismisses a transient status message.
    coordinator.clear_status_message()

    if coordinator.feedback is not None:
        registry = _feedback_registry(context, coordinator.feedback)
    elif coordinator.search.is_active:
        registry = _search_registry(context)
    else:
        registry = _normal_registry(context)

    handled = registry.dispatch(key)
    if handled:
        coordinator.request_quit()
        return True
    return False


__all__ = ["ReviewKeyContext", "handle_review_key", "is_text_key"]

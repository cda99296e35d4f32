"""Key-combo dispatch tables, one per input mode."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Exact-match key table with an optional handler for unbound keys.

    The fallback receives the key token itself; text-entry modes use it to
    insert printable characters.
    """

    def __init__(self, fallback: Callable[[str], bool | None] | None = None) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}
        self._fallback = fallback

    def register(self, combos: tuple[str, ...], handler: Callable[[], bool | None]) -> KeyComboRegistry:
        return self.register_binding(KeyComboBinding(combos, handler))

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def bound_keys(self) -> frozenset[str]:
        return frozenset(self._handlers)

    def dispatch(self, key: str) -> bool | None:
        """Invoke the handler for ``key``; ``None`` means nothing handled it."""
        handler = self._handlers.get(key)
        if handler is not None:
            return handler()
        if self._fallback is not None:
            return self._fallback(key)
        return None


__all__ = ["KeyComboBinding", "KeyComboRegistry"]

"""Input-layer public API for key decoding and per-mode dispatch.

Low-level terminal decoding (``read_key``) is kept apart from the mode
handlers used by the runtime loop.
"""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import ReviewKeyContext, handle_review_key, is_text_key
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "ReviewKeyContext",
    "handle_review_key",
    "is_text_key",
    "read_key",
]

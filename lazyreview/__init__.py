"""Public package surface for lazyreview.

Exports ``main`` for programmatic CLI invocation.
Most implementation lives in submodules under ``lazyreview``.
"""

from __future__ import annotations

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())


class LazyReviewError(Exception):
    """Base class for recoverable lazyreview failures."""


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["LazyReviewError", "main"]

"""Line matching and cross-file diff search."""

from .controller import SearchController
from .matcher import (
    DEFAULT_MATCHER,
    MATCHER_NAMES,
    FzfLineMatcher,
    LineMatcher,
    MatcherUnavailable,
    SubstringLineMatcher,
    make_line_matcher,
    split_diff_lines,
)

__all__ = [
    "DEFAULT_MATCHER",
    "MATCHER_NAMES",
    "FzfLineMatcher",
    "LineMatcher",
    "MatcherUnavailable",
    "SearchController",
    "SubstringLineMatcher",
    "make_line_matcher",
    "split_diff_lines",
]

"""Command-line front door for lazyreview.

Parses CLI options, validates the feedback output path, and detects the VCS.
Then dispatches into the interactive review runtime.
"""

from __future__ import annotations

import argparse
import logging
import secrets
import sys
from collections.abc import Sequence
from pathlib import Path

from . import LazyReviewError
from .output import validate_output_path
from .runtime.app import run_review
from .runtime.config import (
    load_left_pane_percent,
    load_matcher_name,
    load_theme_name,
    save_matcher_name,
    save_theme_name,
)
from .search import MATCHER_NAMES
from .ui_theme import available_theme_names
from .vcs import detect_vcs

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_output_path() -> Path:
    """Return a fresh random ``/tmp/lazyreview-<hex>.md`` path."""
    return Path("/tmp") / f"lazyreview-{secrets.token_hex(8)}.md"


def configure_logging(log_file: str | None, verbose: bool) -> None:
    """Send log records to ``log_file``; nothing is logged to the terminal."""
    if log_file is None:
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


def remember_choices(args: argparse.Namespace) -> None:
    """Persist explicit --theme and --matcher choices for later sessions."""
    if args.theme is not None and args.theme.strip().lower() in available_theme_names():
        save_theme_name(args.theme.strip().lower())
    if args.matcher is not None:
        save_matcher_name(args.matcher)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyreview",
        description="Review Git or Jujutsu changes in the terminal and write feedback to markdown.",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Markdown file for feedback (default: random file in /tmp).",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument(
        "--matcher",
        choices=MATCHER_NAMES,
        default=None,
        help="Line matcher used by search (default: from config, else substring).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--nopager", action="store_true", help="Print the combined diff and exit.")
    parser.add_argument("--log-file", default=None, help="Write logs to this file.")
    parser.add_argument("--verbose", action="store_true", help="Log debug details (needs --log-file).")
    return parser


def main(argv: Sequence[str] | None = None, default_dir: Path | None = None) -> None:
    """Parse CLI arguments and launch a review session.

    ``default_dir`` is primarily for tests; when omitted the current working
    directory is searched for a repository.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.verbose)

    if args.output is None:
        output_path = default_output_path()
        if not args.nopager:
            print(f"Output file: {output_path}", file=sys.stderr)
    else:
        output_path = Path(args.output)

    try:
        output_path = validate_output_path(output_path)
        vcs = detect_vcs(default_dir if default_dir is not None else Path.cwd())
        if args.nopager:
            sys.stdout.write(vcs.diff_all())
            return
        remember_choices(args)
        run_review(
            vcs,
            output_path,
            matcher_name=args.matcher or load_matcher_name(),
            theme_name=args.theme or load_theme_name(),
            no_color=args.no_color,
            left_pane_percent=load_left_pane_percent(),
        )
    except LazyReviewError as exc:
        logger.error("%s", exc)
        raise SystemExit(f"Error: {exc}") from exc


if __name__ == "__main__":
    main()

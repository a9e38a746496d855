from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .collect import collect_stats
from .config import VALID_FORMATS, VALID_ORDER_BY, build_config, default_jobs, load_config
from .git import DEFAULT_TIMEOUT_S
from .models import ConfigError, GitFameError
from .ranking import sort_stats
from .render import write_report

# argparse dest -> key in the JSON config file
_OPTION_KEYS = (
    "repository",
    "revision",
    "order_by",
    "format",
    "use_committer",
    "extensions",
    "languages",
    "exclude",
    "restrict_to",
    "jobs",
    "timeout",
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitfame",
        description="Per-author lines, commits and files for a git repository at a revision.",
    )
    parser.add_argument("--repository", type=str, default=None, help="Path to the git repository (default: .).")
    parser.add_argument("--revision", type=str, default=None, help="Git revision to analyze (default: HEAD).")
    parser.add_argument(
        "--order-by",
        type=str,
        default=None,
        help=f"Key to sort results by: {', '.join(VALID_ORDER_BY)} (default: lines).",
    )
    parser.add_argument(
        "--use-committer",
        action="store_true",
        default=None,
        help="Credit commits to the committer instead of the author.",
    )
    parser.add_argument(
        "--format",
        type=str,
        default=None,
        help=f"Output format: {', '.join(VALID_FORMATS)} (default: tabular).",
    )
    parser.add_argument("--extensions", action="append", default=None, help="Comma-separated file extensions to include.")
    parser.add_argument("--languages", action="append", default=None, help="Comma-separated languages to include.")
    parser.add_argument("--exclude", action="append", default=None, help="Comma-separated glob patterns to exclude files.")
    parser.add_argument("--restrict-to", action="append", default=None, help="Comma-separated glob patterns to restrict files.")
    parser.add_argument("--jobs", type=int, default=None, help=f"Parallel git jobs (default: {default_jobs()}).")
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help=f"Seconds allowed per git call, 0 = no limit (default: {DEFAULT_TIMEOUT_S}).",
    )
    parser.add_argument("--config", type=Path, default=None, help="Optional JSON file with default option values.")
    parser.add_argument("--quiet", action="store_true", help="Do not print progress to stderr.")
    return parser


def merge_options(args: argparse.Namespace, file_options: dict) -> dict:
    options = {k: file_options[k] for k in _OPTION_KEYS if k in file_options}
    for key in _OPTION_KEYS:
        value = getattr(args, key)
        if value is not None:
            options[key] = value
    return options


def _print_progress(done: int, total: int) -> None:
    if done % 50 == 0 or done == total:
        print(f"Processed {done}/{total} files...", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    try:
        config = build_config(merge_options(args, load_config(args.config)))
    except ConfigError as e:
        print(f"gitfame: {e}", file=sys.stderr)
        return 2

    try:
        records = collect_stats(config, progress=None if args.quiet else _print_progress)
    except GitFameError as e:
        print(f"gitfame: failed to collect statistics: {e}", file=sys.stderr)
        return 1

    write_report(sort_stats(records, config.order_by), config.fmt)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Command-line interface for iorewrite."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from errors import EmitError
from rewrite.pipeline import rewrite_tree
from rewrite.report import write_report
from rules.config import ConfigError, load_config
from utils import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iorewrite",
        description=(
            "Rewrite io.ReadAll call sites in a Go source tree to the "
            "instrumented replacement package."
        ),
    )
    parser.add_argument("root", help="Root directory of the Go sources to rewrite")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a config file (default: ROOT/iorewrite.toml if present)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print a unified diff instead of overwriting files",
    )
    parser.add_argument(
        "--report",
        default=None,
        help="Write a JSONL report of per-file outcomes to this path",
    )
    parser.add_argument(
        "--no-gofmt",
        action="store_true",
        help="Do not pipe rewritten files through gofmt",
    )
    parser.add_argument(
        "--relative-locations",
        action="store_true",
        help="Render provenance paths relative to ROOT",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(1 if args.verbose else -1 if args.quiet else 0)

    root = Path(args.root).expanduser().resolve()
    if not root.is_dir():
        sys.stderr.write(f"error: root is not a directory: {root}\n")
        return 2

    config_path = Path(args.config).expanduser() if args.config else None
    try:
        config = load_config(root, config_path)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    if args.no_gofmt:
        config.gofmt = False
    if args.relative_locations:
        config.rule = config.rule.model_copy(update={"location_style": "relative"})

    try:
        summary = rewrite_tree(root, config, dry_run=args.dry_run)
    except EmitError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    if args.dry_run:
        for outcome in summary.outcomes:
            if outcome.diff:
                sys.stdout.write(outcome.diff)

    if args.report:
        report_path = Path(args.report).expanduser()
        try:
            write_report(report_path, summary.outcomes)
        except OSError as exc:
            sys.stderr.write(f"error: failed to write report {report_path}: {exc}\n")
            return 1

    sys.stderr.write(
        f"scanned {summary.files_scanned} file(s), "
        f"rewrote {summary.files_rewritten} file(s), "
        f"{summary.calls_rewritten} call(s)\n"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

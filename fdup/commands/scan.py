"""CLI command rebuilding the index from the tree that holds .fdup/."""
from __future__ import annotations

import argparse
import os
import sys
from argparse import _SubParsersAction
from typing import Optional, Sequence

from tqdm import tqdm

from ..code import PatternError
from ..config import db_path
from ..scan import scan_root
from .common import EXIT_BAD_CONFIG, add_common_flags, fail, is_quiet, is_verbose, locate_and_load, open_index


def _configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-p", "--progress", action="store_true", help="Show progress bar")
    parser.add_argument("-d", "--drop", action="store_true", help="Drop and recreate database")


def add_parser(subparsers: _SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "scan",
        help="Scan files and update the index",
        description="Scan the tree containing .fdup/ recursively and index files whose names match a pattern.",
    )
    _configure_parser(parser)
    parser.set_defaults(handler=run_from_args)
    return parser


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog or "fdup scan", description="Scan files and update the index")
    add_common_flags(parser)
    _configure_parser(parser)
    return parser


class _ProgressBar:
    """Adapts the scanner's ``(current, total)`` callback to a tqdm bar."""

    def __init__(self) -> None:
        self.bar: Optional[tqdm] = None

    def __call__(self, current: int, total: int) -> None:
        if self.bar is None:
            self.bar = tqdm(total=total, desc="Scanning", unit="file", file=sys.stderr)
        self.bar.update(current - self.bar.n)

    def close(self) -> None:
        if self.bar is not None:
            self.bar.close()


def _drop_database(path: str) -> None:
    for suffix in ("", "-wal", "-shm"):
        try:
            os.remove(path + suffix)
        except FileNotFoundError:
            pass
        except OSError as e:
            fail(f"failed to remove database: {e}")


def run_from_args(args: argparse.Namespace) -> int:
    quiet = is_quiet(args)
    verbose = is_verbose(args)
    config_dir, cfg = locate_and_load()

    if args.drop:
        if not quiet:
            print("Dropping database...")
        _drop_database(str(db_path(config_dir)))

    index = open_index(config_dir)
    root = str(config_dir.parent)
    progress = _ProgressBar() if args.progress and not quiet else None
    def log_cb(message: str) -> None:
        if quiet:
            return
        if verbose or message.startswith("[WARN]"):
            print(message)


    try:
        if not quiet:
            print("Scanning...")
        result = scan_root(root, cfg, index, progress_cb=progress, log_cb=log_cb, verbose=verbose)
    except PatternError as e:
        fail(f"invalid patterns: {e}", EXIT_BAD_CONFIG)
    finally:
        if progress is not None:
            progress.close()
        index.close()

    if not quiet:
        print(f"Found {result.total_files} files")
        print(f"Added {result.added_files} new records")

    if verbose and result.errors:
        print(f"\nErrors ({len(result.errors)}):", file=sys.stderr)
        for err in result.errors:
            print(f"  - {err}", file=sys.stderr)
    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    return run_from_args(args)


__all__ = ["add_parser", "build_parser", "run_cli", "run_from_args"]

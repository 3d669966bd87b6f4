"""CLI command listing duplicate groups, or resolving them interactively."""
from __future__ import annotations

import argparse
import sys
from argparse import _SubParsersAction
from typing import List, Optional, Sequence

from ..actions import FileActions
from ..code import format_code
from ..index import DuplicateGroup
from ..platform_ops import PlatformOps, get_platform_ops
from ..util import format_size, missing_paths, plural
from .. import tui
from .common import add_common_flags, fail, is_quiet, locate_and_load, open_index


def _configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-i", "--interactive", action="store_true", help="Interactive TUI mode")
    parser.add_argument("-n", "--dry-run", action="store_true", help="Show what would be done without making changes")
    parser.add_argument("-t", "--trash", action="store_true", help="Move to trash instead of deleting")


def add_parser(subparsers: _SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "dup",
        help="Find duplicate files",
        description="List files with the same code in different directories.",
    )
    _configure_parser(parser)
    parser.set_defaults(handler=run_from_args)
    return parser


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog or "fdup dup", description="Find duplicate files")
    add_common_flags(parser)
    _configure_parser(parser)
    return parser


def print_groups(groups: List[DuplicateGroup]) -> None:
    for group in groups:
        print(f"{format_code(group.code)}: {len(group.files)} {plural(len(group.files))}")
        for f in group.files:
            print(f"  {f.path} ({format_size(f.size)})")
        print()


def warn_missing(groups: List[DuplicateGroup]) -> int:
    missing = missing_paths(f.path for g in groups for f in g.files)
    if missing:
        print(f"[WARN] {len(missing)} indexed {plural(len(missing))} no longer on disk; run 'fdup scan' to refresh", file=sys.stderr)
        for path in missing[:5]:
            print(f"  - {path}", file=sys.stderr)
        if len(missing) > 5:
            print(f"  - ... {len(missing) - 5} more", file=sys.stderr)
    return len(missing)


def stdin_is_tty() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def run_from_args(args: argparse.Namespace, ops: Optional[PlatformOps] = None) -> int:
    quiet = is_quiet(args)
    if args.interactive and not stdin_is_tty():
        fail("interactive mode needs a terminal on stdin")
    config_dir, _ = locate_and_load()
    index = open_index(config_dir)
    try:
        if index.count() == 0:
            if not quiet:
                print("No files indexed. Run 'fdup scan' first")
            return 0

        groups = index.find_duplicates()
        if not groups:
            if not quiet:
                print("No duplicates found")
            return 0

        if not quiet:
            warn_missing(groups)

        if args.interactive:
            ops = ops or get_platform_ops()
            if args.trash and not ops.has_trash:
                print("[WARN] no trash on this platform; files will be deleted permanently", file=sys.stderr)
            actions = FileActions(index, ops, dry_run=args.dry_run, use_trash=args.trash)
            controller = tui.run(groups, actions)
            return 1 if controller.state.error else 0

        print_groups(groups)
        return 0
    finally:
        index.close()


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    return run_from_args(args)


__all__ = ["add_parser", "build_parser", "print_groups", "run_cli", "run_from_args", "stdin_is_tty", "warn_missing"]

"""CLI command searching the index by code."""
from __future__ import annotations

import argparse
import json
from argparse import _SubParsersAction
from typing import List, Optional, Sequence

from ..code import format_code
from ..index import DuplicateGroup
from ..platform_ops import PlatformOps, get_platform_ops
from ..util import plural
from .common import add_common_flags, is_quiet, locate, open_index


def _configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("code", help="Code or code prefix to look up (hyphens and case are ignored)")
    parser.add_argument("-e", "--exact", action="store_true", help="Exact match only")
    parser.add_argument("-j", "--json", action="store_true", help="Output as JSON, one object per code")
    parser.add_argument("--open", action="store_true", help="Open every matching file with the default application")
    parser.add_argument("--reveal", action="store_true", help="Show every matching file in the file manager")


def add_parser(subparsers: _SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "search",
        help="Search for files by code",
        description="Search the index for files whose code matches, or starts with, the given code.",
    )
    _configure_parser(parser)
    parser.set_defaults(handler=run_from_args)
    return parser


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog or "fdup search", description="Search for files by code")
    add_common_flags(parser)
    _configure_parser(parser)
    return parser


def output_json(groups: List[DuplicateGroup]) -> None:
    for group in groups:
        data = {"code": format_code(group.code), "files": [f.path for f in group.files]}
        print(json.dumps(data, ensure_ascii=False))


def output_text(groups: List[DuplicateGroup]) -> None:
    for group in groups:
        print(f"{format_code(group.code)}: {len(group.files)} {plural(len(group.files))}")
        for f in group.files:
            print(f"  {f.path}")


def launch(groups: List[DuplicateGroup], ops: PlatformOps, reveal: bool) -> int:
    failures = 0
    for group in groups:
        for f in group.files:
            try:
                if reveal:
                    ops.reveal(f.path)
                else:
                    ops.open(f.path)
            except (OSError, NotImplementedError) as e:
                failures += 1
                print(f"[WARN] could not {'reveal' if reveal else 'open'} {f.path}: {e}")
    return failures


def run_from_args(args: argparse.Namespace, ops: Optional[PlatformOps] = None) -> int:
    quiet = is_quiet(args)
    config_dir = locate()
    index = open_index(config_dir)
    try:
        groups = index.search_by_code(args.code, exact=args.exact)
    finally:
        index.close()

    if not groups:
        if not quiet:
            print(f"No files found for: {args.code}")
        return 0

    if args.json:
        output_json(groups)
    else:
        output_text(groups)

    if args.open or args.reveal:
        if launch(groups, ops or get_platform_ops(), reveal=args.reveal):
            return 1
    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    return run_from_args(args)


__all__ = ["add_parser", "build_parser", "launch", "output_json", "output_text", "run_cli", "run_from_args"]

"""Unified command-line interface for fdup."""
from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional, Sequence

from . import __version__
from .commands import COMMAND_MODULES
from .commands.common import add_common_flags

Handler = Callable[[argparse.Namespace], int]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fdup",
        description="File duplicate finder based on filename patterns. Extracts codes from filenames, "
        "indexes them in SQLite and reports codes shared across directories.",
    )
    parser.add_argument("--version", action="version", version=f"fdup {__version__}")
    add_common_flags(parser)
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    for module in COMMAND_MODULES:
        add_common_flags(module.add_parser(subparsers), suppress_default=True)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    handler: Optional[Handler] = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1
    if not args.quiet:
        print(f"fdup v{__version__}", file=sys.stderr)
    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())

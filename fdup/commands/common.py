"""Helpers shared by the CLI commands: locating the index and reporting failures."""
from __future__ import annotations

import argparse
import sqlite3
import sys
from pathlib import Path
from typing import NoReturn, Optional, Tuple

from ..config import ConfigError, FdupConfig, NotInitializedError, db_path, find_config_dir, load_config
from ..index import DuplicateIndex

EXIT_NOT_INITIALIZED = 2
EXIT_BAD_CONFIG = 3
EXIT_DB_OPEN = 4


def add_common_flags(parser: argparse.ArgumentParser, suppress_default: bool = False) -> None:
    # SUPPRESS keeps a subcommand parser from resetting flags given before the subcommand
    default = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-q", "--quiet", action="store_true", default=default, help="Suppress output")
    parser.add_argument("--verbose", action="store_true", default=default, help="Show detailed output")


def fail(message: str, code: int = 1) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(code)


def is_quiet(args: argparse.Namespace) -> bool:
    return bool(getattr(args, "quiet", False))


def is_verbose(args: argparse.Namespace) -> bool:
    return bool(getattr(args, "verbose", False))


def locate(start: Optional[Path] = None) -> Path:
    try:
        return find_config_dir(start)
    except NotInitializedError as e:
        fail(str(e), EXIT_NOT_INITIALIZED)


def load(config_dir: Path) -> FdupConfig:
    try:
        return load_config(config_dir)
    except ConfigError as e:
        fail(f"invalid config.yaml: {e}", EXIT_BAD_CONFIG)


def open_index(config_dir: Path) -> DuplicateIndex:
    try:
        return DuplicateIndex.open(db_path(config_dir))
    except (sqlite3.Error, OSError) as e:
        fail(f"failed to open database: {e}", EXIT_DB_OPEN)


def locate_and_load(start: Optional[Path] = None) -> Tuple[Path, FdupConfig]:
    config_dir = locate(start)
    return config_dir, load(config_dir)


__all__ = [
    "EXIT_BAD_CONFIG",
    "EXIT_DB_OPEN",
    "EXIT_NOT_INITIALIZED",
    "add_common_flags",
    "fail",
    "is_quiet",
    "is_verbose",
    "locate",
    "locate_and_load",
    "load",
    "open_index",
]
